from django.urls import path

from .views import PostViewSet

app_name = "post"

post_add = PostViewSet.as_view({"post": "add_post"})
post_all = PostViewSet.as_view({"get": "all_posts"})
post_user_posts = PostViewSet.as_view({"get": "user_posts"})
post_like = PostViewSet.as_view({"post": "like", "get": "like"})
post_dislike = PostViewSet.as_view({"post": "dislike", "get": "dislike"})
post_comment = PostViewSet.as_view({"post": "add_comment"})
post_comments = PostViewSet.as_view({"get": "comments", "post": "comments"})
post_delete = PostViewSet.as_view({"delete": "delete_post"})
post_bookmark = PostViewSet.as_view({"post": "bookmark", "get": "bookmark"})

urlpatterns = [
    path("addpost", post_add, name="add"),
    path("all", post_all, name="all"),
    path("userpost", post_user_posts, name="user-posts"),
    path("userpost/all", post_user_posts, name="user-posts-all"),
    path("<int:pk>/like", post_like, name="like"),
    path("<int:pk>/dislike", post_dislike, name="dislike"),
    path("<int:pk>/comment", post_comment, name="comment"),
    path("<int:pk>/comment/all", post_comments, name="comments"),
    path("delete/<int:pk>", post_delete, name="delete"),
    path("<int:pk>/bookmark", post_bookmark, name="bookmark"),
]
