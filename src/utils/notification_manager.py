"""Password recovery emails via the EmailJS REST API.

Delivery is best effort. Missing credentials are a normal condition: callers
check ``is_configured`` or the returned NotificationResult and fall back to
showing the reset link directly.
"""

import logging
from typing import Optional

import requests

import config
from core.exceptions import NotificationError
from schemas.results import NotificationResult

logger = logging.getLogger(__name__)

# Values shipped in sample configuration files
_PLACEHOLDER_PREFIXES = ("TU_", "YOUR_", "CHANGE_ME")


def _is_set(value: Optional[str]) -> bool:
    if not value or not value.strip():
        return False
    return not value.strip().upper().startswith(_PLACEHOLDER_PREFIXES)


def build_reset_link(token: str, base_url: Optional[str] = None) -> str:
    """Front-end URL that opens the reset form for ``token``."""
    base = (base_url or config.APP_BASE_URL).rstrip("/")
    return f"{base}/reset-password?token={token}"


class EmailNotifier:
    """Sends recovery emails through an EmailJS template."""

    def __init__(
        self,
        service_id: Optional[str] = None,
        template_id: Optional[str] = None,
        public_key: Optional[str] = None,
        private_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.service_id = service_id if service_id is not None else config.EMAILJS_SERVICE_ID
        self.template_id = template_id if template_id is not None else config.EMAILJS_TEMPLATE_ID
        self.public_key = public_key if public_key is not None else config.EMAILJS_PUBLIC_KEY
        self.private_key = private_key if private_key is not None else config.EMAILJS_PRIVATE_KEY
        self.api_url = api_url or config.EMAILJS_API_URL
        self.timeout = timeout or config.EMAILJS_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return (
            _is_set(self.service_id)
            and _is_set(self.template_id)
            and _is_set(self.public_key)
        )

    def send_recovery_email(
        self, to_email: str, to_name: str, reset_link: str
    ) -> NotificationResult:
        """Deliver a reset link.

        Args:
            to_email: Recipient address.
            to_name: Recipient display name.
            reset_link: Link to the reset form.

        Returns:
            NotificationResult; never raises for delivery problems.
        """
        if not self.is_configured:
            logger.warning("EmailJS is not configured, skipping recovery email")
            return NotificationResult(
                success=False,
                message=(
                    "EmailJS no esta configurado. Configura EMAILJS_SERVICE_ID, "
                    "EMAILJS_TEMPLATE_ID y EMAILJS_PUBLIC_KEY"
                ),
            )

        try:
            self._post(
                {
                    "to_email": to_email,
                    "to_name": to_name,
                    "reset_link": reset_link,
                }
            )
        except NotificationError as e:
            logger.error("Failed to send recovery email: %s", e)
            return NotificationResult(
                success=False,
                message="Error al enviar el email. Intenta nuevamente.",
            )

        logger.info("Recovery email sent")
        return NotificationResult(success=True, message="Email enviado exitosamente")

    def _post(self, template_params: dict) -> None:
        payload = {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "template_params": template_params,
        }
        if _is_set(self.private_key):
            payload["accessToken"] = self.private_key

        try:
            resp = requests.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NotificationError("email_request_failed") from exc
        if resp.status_code != 200:
            raise NotificationError(f"email_rejected status={resp.status_code}")
