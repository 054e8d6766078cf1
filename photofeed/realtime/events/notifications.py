from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from photofeed.realtime.events import NOTIFICATION_EVENT
from photofeed.realtime.socketio import emit_event_to_user

if TYPE_CHECKING:  # import for type checking only
    from photofeed.posts.models import Post
    from photofeed.users.models import User

LIKE = "like"
DISLIKE = "dislike"

_MESSAGES = {
    LIKE: "Your post was liked",
    DISLIKE: "Your post was disliked",
}


def build_post_notification_payload(
    kind: str, actor: User, post: Post
) -> dict[str, Any]:
    return {
        "type": kind,
        "userId": actor.pk,
        "userDetails": {
            "id": actor.pk,
            "username": actor.username,
            "profilePicture": actor.profile_picture,
        },
        "postId": post.pk,
        "message": _MESSAGES[kind],
    }


def publish_post_reaction(kind: str, actor: User, post: Post) -> bool:
    """Tell the post owner about a like/dislike. Own posts are skipped."""

    if post.author_id == actor.pk:
        return False
    payload = build_post_notification_payload(kind, actor, post)
    return emit_event_to_user(post.author_id, NOTIFICATION_EVENT, payload)
