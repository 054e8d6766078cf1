from django.contrib.auth import get_user_model
from django.db.models import Prefetch
from rest_framework import serializers

from photofeed.posts.models import Comment
from photofeed.posts.models import Like
from photofeed.posts.models import Post

User = get_user_model()


class AuthorSerializer(serializers.ModelSerializer):
    """Public author fields embedded in posts and comments."""

    profilePicture = serializers.CharField(source="profile_picture", read_only=True)  # noqa: N815

    class Meta:
        model = User
        fields = ["id", "username", "profilePicture"]
        read_only_fields = fields


class CommentSerializer(serializers.ModelSerializer[Comment]):
    author = AuthorSerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

    class Meta:
        model = Comment
        fields = ["id", "text", "author", "post", "createdAt"]
        read_only_fields = ["id", "author", "post", "createdAt"]


class PostSerializer(serializers.ModelSerializer[Post]):
    author = AuthorSerializer(read_only=True)
    likes = serializers.SerializerMethodField()
    comments = CommentSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Post
        fields = [
            "id",
            "caption",
            "image",
            "author",
            "likes",
            "comments",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_likes(self, obj) -> list[int]:
        # Ids of the users who liked the post, in the order they liked it.
        return [like.user_id for like in obj.like_rows.all()]


class PostCreateSerializer(serializers.Serializer):
    caption = serializers.CharField(required=False, allow_blank=True, default="")


class CommentCreateSerializer(serializers.Serializer):
    text = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs.get("text", "").strip():
            msg = "text is required"
            raise serializers.ValidationError(msg)
        return attrs


def feed_queryset():
    """Posts with author, likes and comments (newest first) loaded up front."""
    return Post.objects.select_related("author").prefetch_related(
        Prefetch("like_rows", queryset=Like.objects.order_by("id")),
        Prefetch("comments", queryset=Comment.objects.select_related("author")),
    )
