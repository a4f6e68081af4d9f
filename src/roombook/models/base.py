"""Base model shared by RoomBook entities.

Attributes are snake_case in Python and in DynamoDB items; the HTTP layer
serialises them by their camelCase alias (``check_in`` -> ``checkIn``).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model that accepts both field names and camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
