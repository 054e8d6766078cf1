from django.contrib import admin

from photofeed.posts import models


@admin.register(models.Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ["id", "author", "caption", "created_at"]
    search_fields = ["caption", "author__username"]
    list_filter = ["created_at"]
    raw_id_fields = ["author"]


@admin.register(models.Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ["id", "author", "post", "text", "created_at"]
    search_fields = ["text", "author__username"]
    raw_id_fields = ["author", "post"]


@admin.register(models.Like)
class LikeAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "post", "created_at"]
    raw_id_fields = ["user", "post"]
