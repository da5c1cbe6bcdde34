# travelhub/api/posts/schemas.py
from marshmallow import EXCLUDE, Schema, fields, validate

from travelhub.utils.fields import ObjectIdField, TrimmedString

FEED_SORTS = ('latest', 'popular', 'trending')


# --- 재사용을 위한 중첩 스키마 ---
class AuthorSchema(Schema):
    """게시물/댓글 응답에 포함될 작성자 정보 스키마. (users 문서에서 채워짐)"""
    id = ObjectIdField(attribute='_id', data_key='_id')
    first_name = fields.Str(data_key='firstName')
    last_name = fields.Str(data_key='lastName')
    profile_image = fields.Str(data_key='profileImage')


class ReplyResponseSchema(Schema):
    id = ObjectIdField(attribute='_id', data_key='_id')
    user = fields.Nested(AuthorSchema, allow_none=True)
    content = fields.Str()
    likes = fields.List(ObjectIdField())
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')


class CommentResponseSchema(Schema):
    id = ObjectIdField(attribute='_id', data_key='_id')
    user = fields.Nested(AuthorSchema, allow_none=True)
    content = fields.Str()
    likes = fields.List(ObjectIdField())
    replies = fields.List(fields.Nested(ReplyResponseSchema))
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')


# --- API 요청 스키마 ---
class PostCreateSchema(Schema):
    """POST /api/posts 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    content = TrimmedString(required=True, error_messages={"required": "내용은 필수 항목입니다."},
                            validate=validate.Length(min=1, max=2000, error="내용은 1~2000자 사이여야 합니다."))
    images = fields.List(fields.URL())
    location = TrimmedString(allow_none=True, validate=validate.Length(max=200))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)),
                       validate=validate.Length(max=20))
    group_id = fields.Str(data_key='group', allow_none=True)


class PostUpdateSchema(Schema):
    """PUT /api/posts/{id}. content, location, tags 외의 필드는 무시됩니다."""
    class Meta:
        unknown = EXCLUDE

    content = TrimmedString(validate=validate.Length(min=1, max=2000, error="내용은 1~2000자 사이여야 합니다."))
    location = TrimmedString(allow_none=True, validate=validate.Length(max=200))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)),
                       validate=validate.Length(max=20))


class PostListQuerySchema(Schema):
    """GET /api/posts 쿼리 파라미터. 알 수 없는 sort 값은 'latest' 로 처리합니다."""
    class Meta:
        unknown = EXCLUDE

    tag = fields.Str()
    location = fields.Str()
    sort = fields.Str(load_default='latest')
    group = fields.Str()
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(validate=validate.Range(min=1))


class PageQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(validate=validate.Range(min=1))


class ReportSchema(Schema):
    """POST /api/posts/{id}/report"""
    reason = TrimmedString(required=True, error_messages={"required": "신고 사유는 필수 항목입니다."},
                           validate=validate.Length(min=1, max=500))


# --- API 응답 스키마 ---
class PostResponseSchema(Schema):
    """게시글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    id = ObjectIdField(attribute='_id', data_key='_id')
    author = fields.Nested(AuthorSchema, allow_none=True)
    content = fields.Str()
    images = fields.List(fields.Str())
    location = fields.Str(allow_none=True)
    tags = fields.List(fields.Str())
    likes = fields.List(ObjectIdField())
    like_count = fields.Int(data_key='likeCount')
    comments = fields.List(fields.Nested(CommentResponseSchema))
    comment_count = fields.Int(data_key='commentCount')
    shares = fields.Int()
    group_id = fields.Str(data_key='group', allow_none=True)
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')

    # 서비스 로직에서 조회자 기준으로 채워주는 응답 전용 필드
    is_liked = fields.Bool(data_key='isLiked', dump_default=False)
    is_saved = fields.Bool(data_key='isSaved', dump_default=False)


class LikeStateSchema(Schema):
    like_count = fields.Int(data_key='likeCount')
    is_liked = fields.Bool(data_key='isLiked')
