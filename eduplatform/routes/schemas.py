from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from eduplatform.core import messages


class CamelModel(BaseModel):
    """Base for request/response bodies exchanged in camelCase."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ResultResponse(BaseModel):
    result: str


def reject_null(value):
    # partial updates may omit a NOT NULL column but never clear it
    if value is None:
        raise ValueError(messages.NOT_NULL_PARAMETER)
    return value
