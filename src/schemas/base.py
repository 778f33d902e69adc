"""Shared pydantic base model.

Records are exposed with camelCase keys (``loginAttempts``, ``expiresAt``)
while Python code uses snake_case attributes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
