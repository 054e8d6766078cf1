from functools import partial

from django.contrib.auth import get_user_model
from django.db import transaction
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from photofeed.messaging.models import Message
from photofeed.messaging.services import conversation_messages
from photofeed.messaging.services import send_message
from photofeed.realtime.events.messages import publish_new_message

from .serializers import MessageSerializer
from .serializers import SendMessageSerializer

User = get_user_model()


@extend_schema_view(
    send=extend_schema(tags=["Messages"], request=SendMessageSerializer),
    list_messages=extend_schema(tags=["Messages"]),
)
class MessageViewSet(GenericViewSet):
    serializer_class = MessageSerializer
    queryset = Message.objects.all()
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def _get_other_user(self, pk):
        other = User.objects.filter(pk=pk).first()
        if other is None:
            msg = "User not found"
            raise NotFound(msg)
        return other

    def send(self, request, pk=None):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        receiver = self._get_other_user(pk)

        message = send_message(
            request.user, receiver, serializer.validated_data["textMessage"]
        )
        transaction.on_commit(partial(publish_new_message, message))

        return Response(
            {"success": True, "newMessage": MessageSerializer(message).data},
            status=status.HTTP_201_CREATED,
        )

    def list_messages(self, request, pk=None):
        other = self._get_other_user(pk)
        messages = conversation_messages(request.user, other)
        data = MessageSerializer(messages, many=True).data
        return Response({"success": True, "messages": data})
