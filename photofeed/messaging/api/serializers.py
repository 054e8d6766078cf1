from rest_framework import serializers

from photofeed.messaging.models import Message


class MessageSerializer(serializers.ModelSerializer[Message]):
    conversationId = serializers.IntegerField(source="conversation_id", read_only=True)  # noqa: N815
    senderId = serializers.IntegerField(source="sender_id", read_only=True)  # noqa: N815
    receiverId = serializers.IntegerField(source="receiver_id", read_only=True)  # noqa: N815
    message = serializers.CharField(source="text", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Message
        fields = [
            "id",
            "conversationId",
            "senderId",
            "receiverId",
            "message",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    textMessage = serializers.CharField(  # noqa: N815
        required=False, allow_blank=True, default="", trim_whitespace=False
    )

    def validate(self, attrs):
        if not attrs.get("textMessage", "").strip():
            msg = "textMessage is required"
            raise serializers.ValidationError(msg)
        return attrs
