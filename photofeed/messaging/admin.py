from django.contrib import admin

from photofeed.messaging import models


@admin.register(models.Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ["id", "participant_key", "updated_at"]
    search_fields = ["participant_key"]


@admin.register(models.Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["id", "sender", "receiver", "text", "created_at"]
    search_fields = ["text"]
    raw_id_fields = ["conversation", "sender", "receiver"]
