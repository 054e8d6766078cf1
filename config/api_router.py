from django.urls import include
from django.urls import path

app_name = "api"
urlpatterns = [
    path("user/", include("photofeed.users.api.urls", namespace="user")),
    path("post/", include("photofeed.posts.api.urls", namespace="post")),
    path("message/", include("photofeed.messaging.api.urls", namespace="message")),
]
