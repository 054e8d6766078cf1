from django.urls import path

from .views import MessageViewSet

app_name = "message"

message_send = MessageViewSet.as_view({"post": "send"})
message_list = MessageViewSet.as_view({"get": "list_messages"})

urlpatterns = [
    path("send/<int:pk>", message_send, name="send"),
    path("all/<int:pk>", message_list, name="all"),
]
