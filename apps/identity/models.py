import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Task Tracker account.

    Other apps store the owner as a plain `user_id` UUID (no FK) so each
    app stays independently deployable and testable.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        ordering = ['username']

    def __str__(self):
        return self.email or self.username
