import logging

from django.db.models import Prefetch
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.exceptions import NotFound
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
from photofeed.posts.api.serializers import feed_queryset
from photofeed.users.models import User

from .serializers import ProfileEditSerializer
from .serializers import ProfileSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def _get_user(pk) -> User:
    user = User.objects.filter(pk=pk).first()
    if user is None:
        msg = "User not found"
        raise NotFound(msg)
    return user


@extend_schema_view(
    profile=extend_schema(tags=["Users"]),
    edit_profile=extend_schema(tags=["Users"], request=ProfileEditSerializer),
    suggested=extend_schema(tags=["Users"]),
    follow_or_unfollow=extend_schema(tags=["Users"], request=None),
)
class UserViewSet(GenericViewSet):
    serializer_class = UserSerializer
    queryset = User.objects.all()
    permission_classes = [IsAuthenticated]
    parser_classes = (JSONParser, MultiPartParser, FormParser)
    pagination_class = None

    def profile(self, request, pk=None):
        user = (
            User.objects.filter(pk=pk)
            .prefetch_related(
                "followers",
                "following",
                Prefetch("posts", queryset=feed_queryset()),
                Prefetch("bookmarks", queryset=feed_queryset()),
            )
            .first()
        )
        if user is None:
            msg = "User not found"
            raise NotFound(msg)
        data = ProfileSerializer(user, context={"request": request}).data
        return Response({"user": data, "success": True})

    def edit_profile(self, request):
        serializer = ProfileEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = request.user

        # Empty values leave the stored field untouched.
        changed = []
        for field in ("bio", "gender"):
            value = serializer.validated_data.get(field)
            if value:
                setattr(user, field, value)
                changed.append(field)

        photo = request.FILES.get("profilePhoto")
        if photo is not None:
            try:
                user.profile_picture = get_image_host().upload(
                    photo, folder=f"avatars/{user.pk}"
                )
            except InvalidImageError as exc:
                raise ValidationError(str(exc)) from exc
            changed.append("profile_picture")

        if changed:
            user.save(update_fields=[*changed, "updated_at"])
            log_action(
                "profile_updated",
                actor=user,
                message=",".join(changed),
                target_type="user",
                target_id=user.pk,
            )
        data = UserSerializer(user, context={"request": request}).data
        return Response({"message": "Profile updated.", "success": True, "user": data})

    def suggested(self, request):
        users = (
            User.objects.exclude(pk=request.user.pk)
            .filter(is_active=True)
            .prefetch_related("followers", "following", "posts", "bookmarks")
            .order_by("-created_at", "-id")
        )
        data = UserSerializer(users, many=True, context={"request": request}).data
        return Response({"success": True, "users": data})

    def follow_or_unfollow(self, request, pk=None):
        user = request.user
        if str(user.pk) == str(pk):
            msg = "You cannot follow/unfollow yourself"
            raise ValidationError(msg)
        target = _get_user(pk)

        if user.is_following(target):
            user.following.remove(target)
            verb, message = "unfollowed", "Unfollowed successfully"
        else:
            user.following.add(target)
            verb, message = "followed", "followed successfully"

        log_action(verb, actor=user, target_type="user", target_id=target.pk)
        return Response(
            {
                "message": message,
                "success": True,
                "followersCount": target.followers.count(),
            },
            status=status.HTTP_200_OK,
        )
