# travelhub/api/users/schemas.py
from marshmallow import EXCLUDE, Schema, fields, validate

from travelhub.api.posts.schemas import AuthorSchema
from travelhub.utils.fields import ObjectIdField


class PreferencesUpdateSchema(Schema):
    """PUT /api/users/preferences. 전달된 목록만 교체합니다."""
    class Meta:
        unknown = EXCLUDE

    interested_tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)),
                                  data_key='interestedTags', validate=validate.Length(max=100))
    not_interested_tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)),
                                      data_key='notInterestedTags', validate=validate.Length(max=100))


class ReportedPostSchema(Schema):
    post_id = ObjectIdField(data_key='postId')
    reason = fields.Str()
    reported_at = fields.DateTime(data_key='reportedAt')


class PreferencesResponseSchema(Schema):
    interested_tags = fields.List(fields.Str(), data_key='interestedTags')
    not_interested_tags = fields.List(fields.Str(), data_key='notInterestedTags')
    reported_posts = fields.List(fields.Nested(ReportedPostSchema), data_key='reportedPosts')


# --- 내가 쓴 댓글 ---
class PostSummarySchema(Schema):
    id = ObjectIdField(attribute='_id', data_key='_id')
    content = fields.Str()
    author = fields.Nested(AuthorSchema, allow_none=True)


class ParentCommentSchema(Schema):
    id = ObjectIdField(attribute='_id', data_key='_id')
    content = fields.Str()
    user = fields.Nested(AuthorSchema, allow_none=True)


class MyCommentSchema(Schema):
    """댓글과 답글을 같은 형식으로 표현합니다. 답글은 isReply=true 와 parentComment 를 가집니다."""
    id = ObjectIdField(attribute='_id', data_key='_id')
    content = fields.Str()
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')
    like_count = fields.Int(data_key='likeCount')
    reply_count = fields.Int(data_key='replyCount')
    is_reply = fields.Bool(data_key='isReply')
    parent_comment = fields.Nested(ParentCommentSchema, data_key='parentComment')
    post = fields.Nested(PostSummarySchema)
