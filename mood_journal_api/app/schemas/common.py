"""
Shared response shapes and the base model for API payloads.

All payloads use snake_case attribute names in Python and camelCase
names on the wire (``entryDate``, ``pageSize``, ...).  Both spellings
are accepted on input.
"""

from typing import Any, Generic, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ..core.errors import ValidationFailed


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


DataT = TypeVar("DataT")
ModelT = TypeVar("ModelT", bound=BaseModel)


class Envelope(ApiModel, Generic[DataT]):
    """Uniform success response: ``{"success": true, "data": {...}}``."""

    success: bool = True
    data: DataT


class Ack(ApiModel):
    """Bare success acknowledgement without data."""

    success: bool = True


class IdData(ApiModel):
    id: str


def parse_input(schema: Type[ModelT], data: Union[ModelT, Mapping[str, Any], None]) -> ModelT:
    """Coerce ``data`` into ``schema`` or raise ``ValidationFailed``.

    Instances of ``schema`` are returned unchanged, so the API layer can
    hand over bodies FastAPI already validated.  Anything else is
    validated here, before the caller touches the database.
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data if data is not None else {})
    except ValidationError as exc:
        raise ValidationFailed(format_validation_errors(exc.errors())) from exc


def format_validation_errors(errors: Any) -> str:
    """Render pydantic error dicts as one readable message."""
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        text = error.get("msg", "invalid value")
        messages.append(f"{location}: {text}" if location else text)
    return "; ".join(messages) or ValidationFailed.default_message

