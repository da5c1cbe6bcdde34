# travelhub/api/comments/schemas.py
from marshmallow import EXCLUDE, Schema, validate

from travelhub.utils.fields import TrimmedString


class CommentCreateSchema(Schema):
    """댓글/답글 작성 및 수정 요청 본문. content 만 받습니다."""
    class Meta:
        unknown = EXCLUDE

    content = TrimmedString(required=True, error_messages={"required": "댓글 내용은 필수 항목입니다."},
                            validate=validate.Length(min=1, max=1000, error="댓글은 1~1000자 사이여야 합니다."))
