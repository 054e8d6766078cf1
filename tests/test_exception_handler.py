import pytest
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import serializers
from rest_framework.exceptions import NotAuthenticated
from rest_framework.exceptions import ValidationError

from photofeed.core.exceptions import InvalidCredentialsError
from photofeed.core.exceptions import api_exception_handler
from photofeed.posts.api.views import PostViewSet
from tests.factories import create_user


def handle(exc):
    return api_exception_handler(exc, {"view": PostViewSet()})


def test_field_errors_name_the_field():
    response = handle(ValidationError({"gender": ["not a valid choice"]}))
    assert response.status_code == 400
    assert response.data == {"message": "gender: not a valid choice", "success": False}


def test_non_field_errors_are_bare():
    exc = ValidationError({"non_field_errors": ["Try different email"]})
    assert handle(exc).data["message"] == "Try different email"


def test_serializer_error_list():
    exc = serializers.ValidationError("Image required")
    assert handle(exc).data == {"message": "Image required", "success": False}


def test_not_authenticated_message():
    response = handle(NotAuthenticated())
    assert response.status_code == 401
    assert response.data["message"] == "User not authenticated"


def test_invalid_credentials():
    response = handle(InvalidCredentialsError())
    assert response.status_code == 401
    assert response.data == {"message": "Incorrect email or password", "success": False}


def test_django_errors_are_mapped():
    assert handle(Http404("Post not found")).status_code == 404
    assert handle(Http404("Post not found")).data["message"] == "Post not found"
    assert handle(DjangoPermissionDenied()).status_code == 403


def test_unexpected_error_becomes_structured_500(caplog):
    response = handle(RuntimeError("boom"))

    assert response.status_code == 500
    assert response.data == {"message": "Internal Server Error", "success": False}
    assert "Unhandled error in PostViewSet" in caplog.text


@pytest.mark.django_db
def test_unexpected_error_through_the_api(api_client, monkeypatch):
    def explode(*args, **kwargs):
        msg = "storage offline"
        raise RuntimeError(msg)

    monkeypatch.setattr(PostViewSet, "all_posts", explode)
    api_client.force_authenticate(user=create_user("erin"))

    response = api_client.get("/api/v1/post/all")

    assert response.status_code == 500
    assert response.json() == {"message": "Internal Server Error", "success": False}
