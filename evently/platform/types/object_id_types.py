from bson import ObjectId
from bson.errors import InvalidId

from evently.platform.exception.exceptions import ValidationError


def parse_object_id(value: str | ObjectId, *, field: str = 'id') -> ObjectId:
    """Parse a 24-hex-digit document id, raising ValidationError on anything else."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        raise ValidationError(f'Invalid {field} format')
    try:
        return ObjectId(value.strip())
    except InvalidId as e:
        raise ValidationError(f'Invalid {field} format') from e
