"""
Shared schema configuration.

The JSON API speaks camelCase (bookId, createdAt, isFavorited) while the
Python side stays snake_case. Schemas inherit from CamelModel to get both:
request bodies accept either spelling, responses are emitted in camelCase
(FastAPI serializes response_model by alias).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorDetail(BaseModel):
    """A single field-level error."""

    field: str = Field(..., description="Offending field", examples=["username"])
    message: str = Field(..., description="What is wrong with it")


class ErrorResponse(BaseModel):
    """Body returned for every 4xx/5xx response."""

    message: str = Field(..., examples=["Validation failed"])
    errors: list[ErrorDetail] = Field(default_factory=list)
