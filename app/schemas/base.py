# app/schemas/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (the storefront's JSON style)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Allow populating by field name as well
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    success: bool = True
    message: str
