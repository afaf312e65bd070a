"""
Shared schema base and the response envelope.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase keys, serializes camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(CamelModel):
    success: bool = True


class MessageResponse(Envelope):
    message: str


class ErrorResponse(Envelope):
    success: bool = False
    message: str
    error: str
