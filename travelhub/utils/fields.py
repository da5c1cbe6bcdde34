# travelhub/utils/fields.py
from marshmallow import ValidationError, fields

from travelhub.core.database import to_object_id


class ObjectIdField(fields.Field):
    """bson.ObjectId <-> 문자열 변환 필드."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return str(value)

    def _deserialize(self, value, attr, data, **kwargs):
        object_id = to_object_id(value)
        if object_id is None:
            raise ValidationError("유효하지 않은 ID 형식입니다.")
        return object_id


class TrimmedString(fields.String):
    """앞뒤 공백을 제거한 문자열로 역직렬화합니다."""

    def _deserialize(self, value, attr, data, **kwargs):
        result = super()._deserialize(value, attr, data, **kwargs)
        return result.strip()
