# travelhub/api/auth/schemas.py
from marshmallow import EXCLUDE, Schema, fields, validate

from travelhub.utils.fields import ObjectIdField, TrimmedString


class RegisterSchema(Schema):
    """POST /api/auth/register 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    first_name = TrimmedString(data_key='firstName', required=True, validate=validate.Length(min=1, max=50))
    last_name = TrimmedString(data_key='lastName', required=True, validate=validate.Length(min=1, max=50))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True,
                          validate=validate.Length(min=6, error="비밀번호는 6자 이상이어야 합니다."))


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)


class LogoutRequestSchema(Schema):
    """POST /api/auth/logout 요청 본문. 두 토큰을 모두 무효화합니다."""
    access_token = fields.Str(required=True)
    refresh_token = fields.Str(required=True)


class UserResponseSchema(Schema):
    """본인 정보 응답. 비밀번호 해시 등 민감한 정보는 제외합니다."""
    id = ObjectIdField(attribute='_id', data_key='_id')
    first_name = fields.Str(data_key='firstName')
    last_name = fields.Str(data_key='lastName')
    email = fields.Email()
    role = fields.Str()
    bio = fields.Str()
    profile_image = fields.Str(data_key='profileImage')
    created_at = fields.DateTime(data_key='createdAt')
