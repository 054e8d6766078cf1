from django.urls import path

from .auth_views import LoginView
from .auth_views import LogoutView
from .auth_views import RegisterView
from .views import UserViewSet

app_name = "user"

user_profile = UserViewSet.as_view({"get": "profile"})
user_edit_profile = UserViewSet.as_view({"post": "edit_profile"})
user_suggested = UserViewSet.as_view({"get": "suggested"})
user_follow_or_unfollow = UserViewSet.as_view({"post": "follow_or_unfollow"})

urlpatterns = [
    path("register", RegisterView.as_view(), name="register"),
    path("login", LoginView.as_view(), name="login"),
    path("logout", LogoutView.as_view(), name="logout"),
    path("suggested", user_suggested, name="suggested"),
    path("profile/edit", user_edit_profile, name="edit-profile"),
    path(
        "followorunfollow/<int:pk>",
        user_follow_or_unfollow,
        name="follow-or-unfollow",
    ),
    path("<int:pk>/profile", user_profile, name="profile"),
    path("<int:pk>", user_profile, name="detail"),
]
