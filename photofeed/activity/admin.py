from django.contrib import admin

from photofeed.activity import models


@admin.register(models.ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ["id", "verb", "actor", "target_type", "target_id", "created_at"]
    search_fields = ["verb", "message", "target_type", "ip_address"]
    list_filter = ["verb", "created_at"]
    readonly_fields = ["created_at"]
