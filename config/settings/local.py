# ruff: noqa: E501
from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="vYx2c7oWm0n5e1mJ0Kq8bQbV9zEw6QdRr3tLhF0sHnPq4uCz1aGkT8yXpDi2MeLw",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# COOKIES
# ------------------------------------------------------------------------------
AUTH_COOKIE_SECURE = False

# REALTIME
# ------------------------------------------------------------------------------
REALTIME_TRUST_USER_ID_QUERY = env.bool("REALTIME_TRUST_USER_ID_QUERY", default=True)
