import pytest

from photofeed.messaging.services import send_message
from photofeed.realtime.events import NEW_MESSAGE_EVENT
from photofeed.realtime.events import NOTIFICATION_EVENT
from photofeed.realtime.events.messages import publish_new_message
from photofeed.realtime.events.notifications import DISLIKE
from photofeed.realtime.events.notifications import LIKE
from photofeed.realtime.events.notifications import build_post_notification_payload
from photofeed.realtime.events.notifications import publish_post_reaction
from tests.factories import create_post
from tests.factories import create_user

pytestmark = pytest.mark.django_db


def test_like_payload_shape():
    owner = create_user("owner")
    fan = create_user("fan", profile_picture="http://media.testserver/a.png")
    post = create_post(owner)

    payload = build_post_notification_payload(LIKE, fan, post)

    assert payload == {
        "type": "like",
        "userId": fan.pk,
        "userDetails": {
            "id": fan.pk,
            "username": "fan",
            "profilePicture": "http://media.testserver/a.png",
        },
        "postId": post.pk,
        "message": "Your post was liked",
    }


def test_reaction_reaches_post_owner(connect_user, socket_server):
    owner = create_user("owner")
    fan = create_user("fan")
    post = create_post(owner)
    owner_sid = connect_user(owner)
    connect_user(fan)

    assert publish_post_reaction(DISLIKE, fan, post) is True

    assert socket_server.emitted == [
        {
            "event": NOTIFICATION_EVENT,
            "data": build_post_notification_payload(DISLIKE, fan, post),
            "to": owner_sid,
        }
    ]


def test_reaction_on_own_post_is_not_published(connect_user, socket_server):
    owner = create_user("owner")
    post = create_post(owner)
    connect_user(owner)

    assert publish_post_reaction(LIKE, owner, post) is False
    assert socket_server.emitted == []


def test_new_message_goes_to_receiver(connect_user, socket_server):
    alice = create_user("alice")
    bob = create_user("bob")
    bob_sid = connect_user(bob)
    message = send_message(alice, bob, "hi bob")

    assert publish_new_message(message) is True

    [event] = socket_server.emitted
    assert event["event"] == NEW_MESSAGE_EVENT
    assert event["to"] == bob_sid
    assert event["data"]["message"] == "hi bob"
    assert event["data"]["senderId"] == alice.pk
    assert event["data"]["receiverId"] == bob.pk


def test_new_message_to_offline_receiver_is_dropped(socket_server):
    alice = create_user("alice")
    bob = create_user("bob")
    message = send_message(alice, bob, "are you there?")

    assert publish_new_message(message) is False
    assert socket_server.emitted == []
