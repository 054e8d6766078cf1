from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Default custom user model for photofeed.

    Follow state is a single directed relation: ``user.following`` and the
    reverse ``user.followers`` read the same rows.
    """

    class Gender(models.TextChoices):
        MALE = "male", _("Male")
        FEMALE = "female", _("Female")

    email = EmailField(_("email address"), unique=True)
    bio = CharField(_("Bio"), max_length=500, blank=True)
    gender = CharField(_("Gender"), max_length=10, choices=Gender.choices, blank=True)
    profile_picture = models.URLField(_("Profile picture"), max_length=500, blank=True)
    following = models.ManyToManyField(
        "self",
        symmetrical=False,
        related_name="followers",
        blank=True,
    )
    bookmarks = models.ManyToManyField(
        "posts.Post",
        related_name="bookmarked_by",
        blank=True,
    )
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def is_following(self, other: "User") -> bool:
        return self.following.filter(pk=other.pk).exists()
