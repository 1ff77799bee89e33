"""
Shared Pydantic configuration for the JSON wire format.

Fields are snake_case in Python and camelCase on the wire; requests
accept either spelling.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Plain ``{"message": ...}`` acknowledgement."""
    message: str
