from django.db import migrations
from django.db import models


class Migration(migrations.Migration):
    dependencies = [
        ("posts", "0001_initial"),
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="user",
            name="bookmarks",
            field=models.ManyToManyField(
                blank=True, related_name="bookmarked_by", to="posts.post"
            ),
        ),
    ]
