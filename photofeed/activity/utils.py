from __future__ import annotations

from django.contrib.auth import get_user_model

from .models import ActivityLog


def client_ip(request) -> str:
    if request is None:
        return ""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")


def log_action(
    verb: str,
    *,
    actor: object | None = None,
    message: str = "",
    target_type: str = "",
    target_id: int | None = None,
    ip_address: str = "",
) -> ActivityLog:
    user_model = get_user_model()
    actor_user = actor if isinstance(actor, user_model) else None
    return ActivityLog.objects.create(
        verb=verb,
        actor=actor_user,
        message=message,
        target_type=target_type,
        target_id=target_id,
        ip_address=ip_address,
    )
