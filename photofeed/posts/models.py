from django.conf import settings
from django.db import models


class Post(models.Model):
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="posts"
    )
    caption = models.TextField(blank=True)
    image = models.URLField(max_length=500)
    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="Like",
        related_name="liked_posts",
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Post({self.pk}) by {self.author_id}"

    def is_owned_by(self, user) -> bool:
        return self.author_id == getattr(user, "pk", None)


class Comment(models.Model):
    text = models.TextField()
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments"
    )
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="comments")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Comment({self.pk}) on {self.post_id}"


class Like(models.Model):
    """One user's like on a post. Row order is the order the likes arrived."""

    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="like_rows")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="post_likes"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["post", "user"], name="unique_post_like"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Like({self.user_id} -> {self.post_id})"
