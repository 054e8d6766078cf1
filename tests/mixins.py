from __future__ import annotations

import pytest
from django.urls import reverse
from rest_framework.test import APITestCase

from tests.factories import create_user


class SocialAPITestCase(APITestCase):
    """Base test case with three accounts and request helpers."""

    def setUp(self):
        super().setUp()
        self.alice = create_user("alice")
        self.bob = create_user("bob")
        self.carol = create_user("carol")

    @pytest.fixture(autouse=True)
    def _realtime(self, socket_server, connect_user):
        self.socket_server = socket_server
        self.connect_user = connect_user

    # Utilities -------------------------------------------------------------
    def authenticate(self, user):
        self.client.force_authenticate(user=user)

    def assert_http_status(self, response, expected_status: int):
        msg = getattr(response, "data", response)
        assert response.status_code == expected_status, msg

    def get(self, url_name: str, *, user=None, reverse_kwargs=None, **kwargs):
        if user is not None:
            self.authenticate(user)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.get(url, **kwargs)

    def post(
        self,
        url_name: str,
        *,
        user=None,
        payload=None,
        reverse_kwargs=None,
        fmt="json",
        **kwargs,
    ):
        if user is not None:
            self.authenticate(user)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.post(url, data=payload or {}, format=fmt, **kwargs)

    def delete(self, url_name: str, *, user=None, reverse_kwargs=None, **kwargs):
        if user is not None:
            self.authenticate(user)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.delete(url, **kwargs)

    def assert_failure(self, response, code: int, message: str):
        self.assert_http_status(response, code)
        assert response.data == {"message": message, "success": False}
