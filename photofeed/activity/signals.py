from django.contrib.auth.signals import user_logged_in
from django.contrib.auth.signals import user_logged_out
from django.dispatch import receiver

from .utils import client_ip
from .utils import log_action


@receiver(user_logged_in)
def on_user_logged_in(sender, request, user, **kwargs):
    ua = request.META.get("HTTP_USER_AGENT", "-") if request else "-"
    log_action("login", actor=user, message=f"ua={ua}", ip_address=client_ip(request))


@receiver(user_logged_out)
def on_user_logged_out(sender, request, user, **kwargs):
    log_action("logout", actor=user, ip_address=client_ip(request))
