from django.contrib import admin
from django.contrib.auth import admin as auth_admin
from django.utils.translation import gettext_lazy as _

from photofeed.users.models import User


@admin.register(User)
class UserAdmin(auth_admin.UserAdmin):
    fieldsets = (
        *auth_admin.UserAdmin.fieldsets,
        (_("Profile"), {"fields": ("bio", "gender", "profile_picture")}),
    )
    list_display = ["id", "username", "email", "is_superuser"]
    search_fields = ["username", "email"]
