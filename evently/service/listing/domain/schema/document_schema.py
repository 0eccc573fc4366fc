from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from evently.platform.exception.exceptions import ValidationError


_M = TypeVar('_M', bound='DocumentSchema')


class DocumentSchema(BaseModel):
    """Base write schema: trims every string, ignores keys it does not own."""

    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True, frozen=True)


def validate_document(schema: type[_M], data: Mapping[str, Any]) -> _M:
    try:
        return schema.model_validate(dict(data))
    except PydanticValidationError as e:
        details = '; '.join(
            f'{".".join(str(part) for part in error["loc"]) or "document"}: {error["msg"]}'
            for error in e.errors()
        )
        raise ValidationError(f'{schema.__name__} validation failed: {details}') from e
