"""Shared schema base classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Wire models use camelCase keys (``orderNumber``, ``pickupAddress``).

    Requests may use either camelCase or snake_case; responses are rendered
    by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict:
        """JSON-safe camelCase dict, as sent over REST and the admin socket."""
        return self.model_dump(mode="json", by_alias=True)


class MessageResponse(BaseModel):
    message: str
