from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.signals import user_logged_in
from django.contrib.auth.signals import user_logged_out
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import AccessToken

from photofeed.activity.utils import client_ip
from photofeed.activity.utils import log_action
from photofeed.core.exceptions import InvalidCredentialsError
from photofeed.users.api.serializers import LoginSerializer
from photofeed.users.api.serializers import RegisterSerializer
from photofeed.users.api.serializers import SessionUserSerializer


def _set_cookie(response: Response, value: str, max_age: int) -> None:
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        value,
        max_age=max_age,
        httponly=True,
        secure=getattr(settings, "AUTH_COOKIE_SECURE", not settings.DEBUG),
        samesite=getattr(settings, "AUTH_COOKIE_SAMESITE", "Strict"),
        path="/",
    )


def set_session_cookie(response: Response, token: str) -> None:
    lifetime = settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
    _set_cookie(response, token, int(lifetime.total_seconds()))


def clear_session_cookie(response: Response) -> None:
    _set_cookie(response, "", 0)


@extend_schema(tags=["Authentication"], request=RegisterSerializer)
class RegisterView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        log_action(
            "user_registered",
            actor=user,
            target_type="user",
            target_id=user.pk,
            ip_address=client_ip(request),
        )
        return Response(
            {"message": "Account created successfully.", "success": True},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Authentication"], request=LoginSerializer)
class LoginView(APIView):
    """Verify email + password and hand out the HttpOnly session cookie."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate(
            request,
            username=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            raise InvalidCredentialsError

        token = str(AccessToken.for_user(user))
        user_logged_in.send(sender=user.__class__, request=request, user=user)

        data = SessionUserSerializer(user, context={"request": request}).data
        response = Response(
            {
                "message": f"Welcome back {user.username}",
                "success": True,
                "user": data,
            }
        )
        set_session_cookie(response, token)
        return response


@extend_schema(tags=["Authentication"], request=None)
class LogoutView(APIView):
    """Expire the session cookie of the authenticated caller."""

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        user = request.user
        user_logged_out.send(sender=user.__class__, request=request, user=user)

        response = Response({"message": "Logged out successfully.", "success": True})
        clear_session_cookie(response)
        return response
