from rest_framework import serializers

from photofeed.posts.api.serializers import PostSerializer
from photofeed.users.models import User

MISSING_FIELDS_MESSAGE = "Something is missing, please check!"


class UserSerializer(serializers.ModelSerializer[User]):
    """Account as seen by other users. Relations are ids."""

    profilePicture = serializers.CharField(source="profile_picture", read_only=True)  # noqa: N815
    followers = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    following = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    posts = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    bookmarks = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "profilePicture",
            "bio",
            "gender",
            "followers",
            "following",
            "posts",
            "bookmarks",
            "createdAt",
        ]
        read_only_fields = fields


class SessionUserSerializer(UserSerializer):
    """Login payload: the caller's own posts come populated."""

    posts = PostSerializer(many=True, read_only=True)

    class Meta(UserSerializer.Meta):
        fields = [
            "id",
            "username",
            "email",
            "profilePicture",
            "bio",
            "followers",
            "following",
            "posts",
        ]
        read_only_fields = fields


class ProfileSerializer(UserSerializer):
    """Profile page: posts and bookmarks populated."""

    posts = PostSerializer(many=True, read_only=True)
    bookmarks = PostSerializer(many=True, read_only=True)


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True, max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(
        required=False, allow_blank=True, write_only=True, trim_whitespace=False
    )

    def validate(self, attrs):
        if not all(attrs.get(f) for f in ("username", "email", "password")):
            raise serializers.ValidationError(MISSING_FIELDS_MESSAGE)
        taken = (
            User.objects.filter(email__iexact=attrs["email"]).exists()
            or User.objects.filter(username__iexact=attrs["username"]).exists()
        )
        if taken:
            msg = "Try different email"
            raise serializers.ValidationError(msg)
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password"],
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(
        required=False, allow_blank=True, write_only=True, trim_whitespace=False
    )

    def validate(self, attrs):
        if not attrs.get("email") or not attrs.get("password"):
            raise serializers.ValidationError(MISSING_FIELDS_MESSAGE)
        return attrs


class ProfileEditSerializer(serializers.Serializer):
    bio = serializers.CharField(required=False, allow_blank=True, max_length=500)
    gender = serializers.ChoiceField(
        choices=User.Gender.choices, required=False, allow_blank=True
    )
