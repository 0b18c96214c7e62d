from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire (either accepted on input)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    message: str


def require_text(value, field_name: str):
    """Reject blank strings for required text fields"""
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} is required")
    return str(value).strip()
