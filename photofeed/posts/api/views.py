"""Posts API: feed, likes, comments, bookmarks and deletion."""

import logging
from functools import partial

from django.db import transaction
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser
from rest_framework.parsers import JSONParser
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from photofeed.activity.utils import log_action
from photofeed.integrations.images import InvalidImageError
from photofeed.integrations.images import get_image_host
from photofeed.posts.models import Comment
from photofeed.posts.models import Post
from photofeed.realtime.events.notifications import DISLIKE
from photofeed.realtime.events.notifications import LIKE
from photofeed.realtime.events.notifications import publish_post_reaction

from .serializers import CommentCreateSerializer
from .serializers import CommentSerializer
from .serializers import PostCreateSerializer
from .serializers import PostSerializer
from .serializers import feed_queryset

logger = logging.getLogger(__name__)


@extend_schema_view(
    add_post=extend_schema(tags=["Posts"], request=PostCreateSerializer),
    all_posts=extend_schema(tags=["Posts"]),
    user_posts=extend_schema(tags=["Posts"]),
    like=extend_schema(tags=["Posts"], request=None),
    dislike=extend_schema(tags=["Posts"], request=None),
    add_comment=extend_schema(tags=["Comments"], request=CommentCreateSerializer),
    comments=extend_schema(tags=["Comments"]),
    delete_post=extend_schema(tags=["Posts"]),
    bookmark=extend_schema(tags=["Posts"], request=None),
)
class PostViewSet(GenericViewSet):
    serializer_class = PostSerializer
    permission_classes = [IsAuthenticated]
    parser_classes = (JSONParser, MultiPartParser, FormParser)
    pagination_class = None

    def get_queryset(self):
        return feed_queryset()

    def _get_post(self, pk) -> Post:
        post = Post.objects.filter(pk=pk).first()
        if post is None:
            msg = "Post not found"
            raise NotFound(msg)
        return post

    def add_post(self, request):
        serializer = PostCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = request.FILES.get("image")
        if image is None:
            msg = "Image required"
            raise ValidationError(msg)
        try:
            url = get_image_host().upload(
                image, folder=f"posts/{request.user.pk}", optimize=True
            )
        except InvalidImageError as exc:
            raise ValidationError(str(exc)) from exc

        post = Post.objects.create(
            author=request.user,
            caption=serializer.validated_data["caption"],
            image=url,
        )
        log_action(
            "post_created", actor=request.user, target_type="post", target_id=post.pk
        )
        post = self.get_queryset().get(pk=post.pk)
        return Response(
            {
                "message": "New post added",
                "post": PostSerializer(post, context={"request": request}).data,
                "success": True,
            },
            status=status.HTTP_201_CREATED,
        )

    def all_posts(self, request):
        posts = self.get_queryset()
        data = PostSerializer(posts, many=True, context={"request": request}).data
        return Response({"posts": data, "success": True})

    def user_posts(self, request):
        posts = self.get_queryset().filter(author=request.user)
        data = PostSerializer(posts, many=True, context={"request": request}).data
        return Response({"posts": data, "success": True})

    def like(self, request, pk=None):
        post = self._get_post(pk)
        # Relation add is a set operation: liking twice keeps one row.
        post.likes.add(request.user)
        transaction.on_commit(partial(publish_post_reaction, LIKE, request.user, post))
        return Response({"message": "Post liked", "success": True})

    def dislike(self, request, pk=None):
        post = self._get_post(pk)
        post.likes.remove(request.user)
        transaction.on_commit(
            partial(publish_post_reaction, DISLIKE, request.user, post)
        )
        return Response({"message": "Post disliked", "success": True})

    def add_comment(self, request, pk=None):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        post = self._get_post(pk)
        comment = Comment.objects.create(
            text=serializer.validated_data["text"],
            author=request.user,
            post=post,
        )
        return Response(
            {
                "message": "Comment added",
                "comment": CommentSerializer(comment, context={"request": request}).data,
                "success": True,
            },
            status=status.HTTP_201_CREATED,
        )

    def comments(self, request, pk=None):
        post = self._get_post(pk)
        comments = (
            Comment.objects.filter(post=post)
            .select_related("author")
            .order_by("created_at", "id")
        )
        data = CommentSerializer(comments, many=True, context={"request": request}).data
        return Response({"success": True, "comments": data})

    def delete_post(self, request, pk=None):
        post = self._get_post(pk)
        if not post.is_owned_by(request.user):
            msg = "Unauthorized"
            raise PermissionDenied(msg)

        post_id = post.pk
        with transaction.atomic():
            Comment.objects.filter(post_id=post_id).delete()
            # Likes and bookmarks are relation rows and go with the post.
            post.delete()
        log_action(
            "post_deleted", actor=request.user, target_type="post", target_id=post_id
        )
        return Response({"success": True, "message": "Post deleted"})

    def bookmark(self, request, pk=None):
        post = self._get_post(pk)
        user = request.user
        if user.bookmarks.filter(pk=post.pk).exists():
            user.bookmarks.remove(post)
            return Response(
                {
                    "type": "unsaved",
                    "message": "Post removed from bookmark",
                    "success": True,
                }
            )
        user.bookmarks.add(post)
        return Response({"type": "saved", "message": "Post bookmarked", "success": True})
