"""
StorageManager against an in-memory SQLite database.
"""

from datetime import timedelta

import pytest

from core.exceptions import UserAlreadyExistsError
from models.session import SessionModel
from schemas.recovery_token import RecoveryToken
from schemas.session import Session
from schemas.user import User, UserRole
from utils import time_utils
from utils.security import hash_password, verify_password
from utils.storage_manager import DEFAULT_USERS, StorageManager


def make_session(session_id: str, user_id: int = 1, minutes: int = 30) -> Session:
    now = time_utils.utc_now()
    return Session(
        session_id=session_id,
        user_id=user_id,
        email="estudiante@gmail.com",
        name="Juan Estudiante",
        role=UserRole.STUDENT,
        login_time=time_utils.to_iso(now),
        expires_at=time_utils.iso_after(minutes=minutes, start=now),
    )


def make_token(token: str, email: str = "estudiante@gmail.com") -> RecoveryToken:
    now = time_utils.utc_now()
    return RecoveryToken(
        token=token,
        email=email,
        created_at=time_utils.to_iso(now),
        expires_at=time_utils.iso_after(hours=24, start=now),
    )


# --- Initialization ---


def test_initialize_seeds_default_users(storage):
    users = storage.get_users()

    assert [u.email for u in users] == [entry["email"] for entry in DEFAULT_USERS]
    assert storage.is_initialized()
    for entry, user in zip(DEFAULT_USERS, users):
        assert verify_password(entry["password"], user.password_hash)


def test_seeded_blocked_user_is_blocked_for_thirty_minutes(storage, clock):
    user = storage.find_user_by_email("bloqueado@gmail.com")

    assert user.login_attempts == 4
    assert user.blocked_until == time_utils.to_iso(clock.now + timedelta(minutes=30))


def test_initialize_runs_only_once(storage):
    storage.update_user("estudiante@gmail.com", name="Otro Nombre")
    storage.initialize()

    assert len(storage.get_users()) == len(DEFAULT_USERS)
    assert storage.find_user_by_email("estudiante@gmail.com").name == "Otro Nombre"


def test_reset_restores_default_dataset(storage):
    storage.save_users(storage.get_users()[:1])
    storage.replace_tokens_for_email("estudiante@gmail.com", make_token("t1"))
    storage.save_session(make_session("s1"))

    storage.reset()

    assert len(storage.get_users()) == len(DEFAULT_USERS)
    assert storage.get_tokens() == []
    assert storage.get_session("s1") is None


# --- Users ---


def test_find_user_by_email_ignores_case(storage):
    user = storage.find_user_by_email("ESTUDIANTE@Gmail.com")
    assert user is not None
    assert user.id == 1


def test_find_user_by_email_unknown_or_empty(storage):
    assert storage.find_user_by_email("nadie@gmail.com") is None
    assert storage.find_user_by_email("") is None


def test_save_users_replaces_the_whole_table(storage):
    kept = storage.get_users()[:2]
    kept[0] = kept[0].model_copy(update={"name": "Renombrado"})

    storage.save_users(kept)

    users = storage.get_users()
    assert [u.id for u in users] == [1, 2]
    assert users[0].name == "Renombrado"


def test_save_users_with_empty_list_clears_users(storage):
    storage.save_users([])
    assert storage.get_users() == []
    assert storage.next_user_id() == 1


def test_next_user_id_is_max_plus_one(storage):
    assert storage.next_user_id() == len(DEFAULT_USERS) + 1


def test_add_user_and_duplicate_email(storage):
    user = User(
        id=storage.next_user_id(),
        email="nuevo@gmail.com",
        password_hash=hash_password("Abcd1234!@x"),
        name="Nuevo Usuario",
    )
    storage.add_user(user)
    assert storage.find_user_by_email("nuevo@gmail.com").id == user.id

    duplicate = user.model_copy(update={"id": storage.next_user_id()})
    with pytest.raises(UserAlreadyExistsError) as excinfo:
        storage.add_user(duplicate)
    assert excinfo.value.email == "nuevo@gmail.com"
    # Session is usable after the failed insert
    assert len(storage.get_users()) == len(DEFAULT_USERS) + 1


def test_update_user_converts_enums(storage):
    updated = storage.update_user("profesor@gmail.com", role=UserRole.ADMINISTRATOR)
    assert updated.role == UserRole.ADMINISTRATOR

    assert storage.update_user("nadie@gmail.com", name="X") is None


@pytest.mark.parametrize("field", ["email", "id"])
def test_update_user_rejects_fields_that_are_not_updatable(storage, field):
    with pytest.raises(ValueError, match=field):
        storage.update_user("profesor@gmail.com", **{field: "x"})

    assert storage.find_user_by_email("profesor@gmail.com").id == 2


def test_increment_login_attempts_returns_new_count(storage):
    assert storage.increment_login_attempts("estudiante@gmail.com") == 1
    assert storage.increment_login_attempts("ESTUDIANTE@gmail.com") == 2
    assert storage.find_user_by_email("estudiante@gmail.com").login_attempts == 2
    assert storage.increment_login_attempts("nadie@gmail.com") is None


def test_transaction_rolls_back_every_write(storage):
    with pytest.raises(RuntimeError):
        with storage.transaction():
            storage.update_user("estudiante@gmail.com", name="Cambiado")
            storage.update_user("profesor@gmail.com", name="Cambiado")
            raise RuntimeError("boom")

    assert storage.find_user_by_email("estudiante@gmail.com").name == "Juan Estudiante"
    assert storage.find_user_by_email("profesor@gmail.com").name == "Maria Profesora"


def test_transaction_commits_on_success(storage):
    with storage.transaction():
        storage.update_user("estudiante@gmail.com", name="Cambiado")

    storage.db.rollback()
    assert storage.find_user_by_email("estudiante@gmail.com").name == "Cambiado"


# --- Recovery tokens ---


def test_replace_tokens_for_email_keeps_only_latest(storage):
    storage.replace_tokens_for_email("estudiante@gmail.com", make_token("first"))
    storage.replace_tokens_for_email(
        "profesor@gmail.com", make_token("other", "profesor@gmail.com")
    )
    storage.replace_tokens_for_email("ESTUDIANTE@gmail.com", make_token("second"))

    assert storage.find_token("first") is None
    assert storage.find_token("second") is not None
    assert sorted(t.token for t in storage.get_tokens()) == ["other", "second"]


def test_save_tokens_replaces_the_whole_table(storage):
    storage.save_tokens([make_token("a"), make_token("b", "profesor@gmail.com")])
    storage.save_tokens([make_token("b", "profesor@gmail.com")])

    assert [t.token for t in storage.get_tokens()] == ["b"]


def test_mark_token_used_only_once(storage):
    storage.replace_tokens_for_email("estudiante@gmail.com", make_token("abc"))

    assert storage.mark_token_used("abc") is True
    assert storage.mark_token_used("abc") is False
    assert storage.find_token("abc").used is True
    assert storage.mark_token_used("missing") is False


# --- Sessions ---


def test_session_round_trip(storage):
    session = make_session("s1")
    storage.save_session(session)

    assert storage.get_session("s1") == session
    assert storage.get_session("unknown") is None
    assert storage.get_session("") is None


def test_expired_session_is_purged_on_read(storage, clock, db):
    storage.save_session(make_session("s1"))

    clock.advance(minutes=30)
    assert storage.get_session("s1") is not None

    clock.advance(seconds=1)
    assert storage.get_session("s1") is None
    assert db.query(SessionModel).count() == 0


def test_saving_a_session_drops_other_sessions_of_the_user(storage):
    storage.save_session(make_session("s1", user_id=1))
    storage.save_session(make_session("other", user_id=2))
    storage.save_session(make_session("s2", user_id=1))

    assert storage.get_session("s1") is None
    assert storage.get_session("s2") is not None
    assert storage.get_session("other") is not None


def test_clear_session(storage):
    storage.save_session(make_session("s1"))
    storage.clear_session("s1")
    storage.clear_session("never-existed")

    assert storage.get_session("s1") is None


# --- Degraded mode ---


def test_storage_without_backend_is_inert():
    storage = StorageManager(None)

    storage.initialize()
    storage.save_users([])
    storage.save_session(make_session("s1"))

    assert not storage.available
    assert not storage.is_initialized()
    assert storage.get_users() == []
    assert storage.get_tokens() == []
    assert storage.find_user_by_email("estudiante@gmail.com") is None
    assert storage.get_session("s1") is None
    assert storage.increment_login_attempts("estudiante@gmail.com") is None
    assert storage.mark_token_used("abc") is False
    assert storage.next_user_id() == 1
    with storage.transaction():
        storage.clear_session("s1")
