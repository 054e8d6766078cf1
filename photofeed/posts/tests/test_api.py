from datetime import timedelta
from unittest import mock

from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from PIL import Image
from rest_framework import status

from photofeed.activity.models import ActivityLog
from photofeed.posts.models import Comment
from photofeed.posts.models import Post
from photofeed.realtime.events import NOTIFICATION_EVENT
from tests.factories import create_comment
from tests.factories import create_post
from tests.factories import make_image
from tests.mixins import SocialAPITestCase


def stored_name(url: str) -> str:
    return url.removeprefix("http://media.testserver/")


class TestAddPost(SocialAPITestCase):
    def test_image_is_optimized_and_hosted(self):
        r = self.post(
            "api_v1:post:add",
            user=self.alice,
            payload={"caption": "sunset", "image": make_image(size=(1600, 1200))},
            fmt="multipart",
        )

        self.assert_http_status(r, status.HTTP_201_CREATED)
        assert r.data["message"] == "New post added"
        post = r.data["post"]
        assert post["caption"] == "sunset"
        assert post["author"] == {
            "id": self.alice.pk,
            "username": "alice",
            "profilePicture": "",
        }
        assert post["likes"] == []
        assert post["comments"] == []

        name = stored_name(post["image"])
        assert name.startswith(f"posts/{self.alice.pk}/")
        assert name.endswith(".jpeg")
        with default_storage.open(name) as fh, Image.open(fh) as img:
            assert img.format == "JPEG"
            assert img.size == (800, 600)

        assert ActivityLog.objects.filter(
            verb="post_created", actor=self.alice, target_id=post["id"]
        ).exists()

    def test_small_image_is_not_enlarged(self):
        r = self.post(
            "api_v1:post:add",
            user=self.alice,
            payload={"image": make_image(size=(320, 200))},
            fmt="multipart",
        )
        self.assert_http_status(r, status.HTTP_201_CREATED)
        with default_storage.open(stored_name(r.data["post"]["image"])) as fh:
            with Image.open(fh) as img:
                assert img.size == (320, 200)

    def test_image_required(self):
        r = self.post(
            "api_v1:post:add",
            user=self.alice,
            payload={"caption": "no picture"},
            fmt="multipart",
        )
        self.assert_failure(r, status.HTTP_400_BAD_REQUEST, "Image required")
        assert not Post.objects.exists()

    def test_not_an_image(self):
        upload = SimpleUploadedFile(
            "fake.png", b"definitely not a png", content_type="image/png"
        )

        r = self.post(
            "api_v1:post:add",
            user=self.alice,
            payload={"image": upload},
            fmt="multipart",
        )
        self.assert_failure(r, status.HTTP_400_BAD_REQUEST, "Invalid image file")

    def test_image_over_pixel_cap(self):
        with self.settings(IMAGE_MAX_PIXELS=10_000):
            r = self.post(
                "api_v1:post:add",
                user=self.alice,
                payload={"image": make_image(size=(200, 100))},
                fmt="multipart",
            )
        self.assert_failure(
            r, status.HTTP_400_BAD_REQUEST, "Image too large: 200x100 pixels"
        )
        assert not Post.objects.exists()

    def test_decompression_bomb(self):
        with mock.patch.object(Image, "MAX_IMAGE_PIXELS", 1_000):
            r = self.post(
                "api_v1:post:add",
                user=self.alice,
                payload={"image": make_image(size=(100, 100))},
                fmt="multipart",
            )
        self.assert_failure(r, status.HTTP_400_BAD_REQUEST, "Image too large")


class TestFeed(SocialAPITestCase):
    def test_newest_first_with_comments(self):
        older = create_post(self.bob, caption="older")
        newer = create_post(self.carol, caption="newer")
        Post.objects.filter(pk=older.pk).update(
            created_at=timezone.now() - timedelta(hours=1)
        )
        first = create_comment(newer, self.alice, "first")
        second = create_comment(newer, self.bob, "second")
        Comment.objects.filter(pk=first.pk).update(
            created_at=timezone.now() - timedelta(minutes=5)
        )

        r = self.get("api_v1:post:all", user=self.alice)

        self.assert_http_status(r, status.HTTP_200_OK)
        assert [p["id"] for p in r.data["posts"]] == [newer.pk, older.pk]
        comments = r.data["posts"][0]["comments"]
        assert [c["id"] for c in comments] == [second.pk, first.pk]
        assert comments[0]["author"]["username"] == "bob"

    def test_user_posts_only_lists_own(self):
        mine = create_post(self.alice)
        create_post(self.bob)

        for name in ("api_v1:post:user-posts", "api_v1:post:user-posts-all"):
            r = self.get(name, user=self.alice)
            self.assert_http_status(r, status.HTTP_200_OK)
            assert [p["id"] for p in r.data["posts"]] == [mine.pk]

    def test_likes_listed_in_like_order(self):
        post = create_post(self.bob)
        self.post("api_v1:post:like", user=self.carol, reverse_kwargs={"pk": post.pk})
        self.post("api_v1:post:like", user=self.alice, reverse_kwargs={"pk": post.pk})

        r = self.get("api_v1:post:all", user=self.alice)

        self.assert_http_status(r, status.HTTP_200_OK)
        # carol was created after alice, so id order would put alice first
        assert r.data["posts"][0]["likes"] == [self.carol.pk, self.alice.pk]


class TestLikes(SocialAPITestCase):
    def setUp(self):
        super().setUp()
        self.bobs_post = create_post(self.bob)

    def react(self, verb, user):
        return self.post(
            f"api_v1:post:{verb}",
            user=user,
            reverse_kwargs={"pk": self.bobs_post.pk},
        )

    def test_like_is_idempotent(self):
        self.react("like", self.alice)
        r = self.react("like", self.alice)

        self.assert_http_status(r, status.HTTP_200_OK)
        assert r.data == {"message": "Post liked", "success": True}
        assert list(self.bobs_post.likes.all()) == [self.alice]

    def test_like_notifies_online_owner(self):
        bob_sid = self.connect_user(self.bob)

        with self.captureOnCommitCallbacks(execute=True):
            self.react("like", self.alice)

        [event] = self.socket_server.events_for(bob_sid)
        assert event["event"] == NOTIFICATION_EVENT
        assert event["data"]["type"] == "like"
        assert event["data"]["userId"] == self.alice.pk
        assert event["data"]["postId"] == self.bobs_post.pk
        assert event["data"]["message"] == "Your post was liked"

    def test_like_own_post_does_not_notify(self):
        self.connect_user(self.bob)

        with self.captureOnCommitCallbacks(execute=True):
            self.react("like", self.bob)

        assert self.socket_server.emitted == []
        assert list(self.bobs_post.likes.all()) == [self.bob]

    def test_like_with_owner_offline(self):
        with self.captureOnCommitCallbacks(execute=True):
            r = self.react("like", self.alice)

        self.assert_http_status(r, status.HTTP_200_OK)
        assert self.socket_server.emitted == []

    def test_dislike(self):
        self.bobs_post.likes.add(self.alice, self.carol)
        bob_sid = self.connect_user(self.bob)

        with self.captureOnCommitCallbacks(execute=True):
            r = self.react("dislike", self.alice)

        assert r.data == {"message": "Post disliked", "success": True}
        assert list(self.bobs_post.likes.all()) == [self.carol]
        [event] = self.socket_server.events_for(bob_sid)
        assert event["data"]["type"] == "dislike"
        assert event["data"]["message"] == "Your post was disliked"

    def test_dislike_without_like(self):
        r = self.react("dislike", self.alice)
        self.assert_http_status(r, status.HTTP_200_OK)
        assert not self.bobs_post.likes.exists()

    def test_get_alias(self):
        r = self.get(
            "api_v1:post:like",
            user=self.alice,
            reverse_kwargs={"pk": self.bobs_post.pk},
        )
        self.assert_http_status(r, status.HTTP_200_OK)
        assert self.bobs_post.likes.filter(pk=self.alice.pk).exists()

    def test_unknown_post(self):
        r = self.post("api_v1:post:like", user=self.alice, reverse_kwargs={"pk": 9999})
        self.assert_failure(r, status.HTTP_404_NOT_FOUND, "Post not found")


class TestComments(SocialAPITestCase):
    def setUp(self):
        super().setUp()
        self.bobs_post = create_post(self.bob)

    def test_add_comment(self):
        r = self.post(
            "api_v1:post:comment",
            user=self.alice,
            payload={"text": "great shot"},
            reverse_kwargs={"pk": self.bobs_post.pk},
        )

        self.assert_http_status(r, status.HTTP_201_CREATED)
        assert r.data["message"] == "Comment added"
        comment = r.data["comment"]
        assert comment["text"] == "great shot"
        assert comment["author"]["id"] == self.alice.pk
        assert comment["post"] == self.bobs_post.pk

    def test_blank_comment(self):
        r = self.post(
            "api_v1:post:comment",
            user=self.alice,
            payload={"text": "   "},
            reverse_kwargs={"pk": self.bobs_post.pk},
        )
        self.assert_failure(r, status.HTTP_400_BAD_REQUEST, "text is required")
        assert not Comment.objects.exists()

    def test_list_comments(self):
        first = create_comment(self.bobs_post, self.alice, "one")
        create_comment(self.bobs_post, self.bob, "two")
        create_comment(create_post(self.carol), self.alice, "elsewhere")
        Comment.objects.filter(pk=first.pk).update(
            created_at=timezone.now() - timedelta(minutes=5)
        )

        r = self.get(
            "api_v1:post:comments",
            user=self.carol,
            reverse_kwargs={"pk": self.bobs_post.pk},
        )

        self.assert_http_status(r, status.HTTP_200_OK)
        # Oldest first, unlike the comments embedded in the feed.
        assert [c["text"] for c in r.data["comments"]] == ["one", "two"]

    def test_list_comments_of_unknown_post(self):
        r = self.get(
            "api_v1:post:comments", user=self.carol, reverse_kwargs={"pk": 9999}
        )
        self.assert_failure(r, status.HTTP_404_NOT_FOUND, "Post not found")


class TestDeletePost(SocialAPITestCase):
    def setUp(self):
        super().setUp()
        self.bobs_post = create_post(self.bob)
        create_comment(self.bobs_post, self.alice)
        create_comment(self.bobs_post, self.carol)
        self.bobs_post.likes.add(self.alice)
        self.carol.bookmarks.add(self.bobs_post)
        self.keep = create_post(self.alice)
        create_comment(self.keep, self.bob)

    def test_owner_deletes_post_and_dependents(self):
        r = self.delete(
            "api_v1:post:delete",
            user=self.bob,
            reverse_kwargs={"pk": self.bobs_post.pk},
        )

        self.assert_http_status(r, status.HTTP_200_OK)
        assert r.data == {"success": True, "message": "Post deleted"}
        assert not Post.objects.filter(pk=self.bobs_post.pk).exists()
        assert not Comment.objects.filter(post_id=self.bobs_post.pk).exists()
        assert not self.carol.bookmarks.exists()
        assert not self.alice.liked_posts.exists()
        # Unrelated content survives.
        assert Comment.objects.filter(post=self.keep).count() == 1
        assert ActivityLog.objects.filter(
            verb="post_deleted", target_id=self.bobs_post.pk
        ).exists()

    def test_non_owner_is_refused(self):
        r = self.delete(
            "api_v1:post:delete",
            user=self.alice,
            reverse_kwargs={"pk": self.bobs_post.pk},
        )

        self.assert_failure(r, status.HTTP_403_FORBIDDEN, "Unauthorized")
        assert Post.objects.filter(pk=self.bobs_post.pk).exists()
        assert Comment.objects.filter(post=self.bobs_post).count() == 2

    def test_unknown_post(self):
        r = self.delete(
            "api_v1:post:delete", user=self.bob, reverse_kwargs={"pk": 9999}
        )
        self.assert_failure(r, status.HTTP_404_NOT_FOUND, "Post not found")


class TestBookmark(SocialAPITestCase):
    def test_toggle(self):
        post = create_post(self.bob)
        kwargs = {"pk": post.pk}

        r = self.post("api_v1:post:bookmark", user=self.alice, reverse_kwargs=kwargs)
        self.assert_http_status(r, status.HTTP_200_OK)
        assert r.data["type"] == "saved"
        assert list(self.alice.bookmarks.all()) == [post]

        r = self.post("api_v1:post:bookmark", user=self.alice, reverse_kwargs=kwargs)
        assert r.data["type"] == "unsaved"
        assert not self.alice.bookmarks.exists()
