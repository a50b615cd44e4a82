import uuid
from django.db import models
from django.utils import timezone


class Priority(models.TextChoices):
    LOW = 'low', 'Low'
    MEDIUM = 'medium', 'Medium'
    HIGH = 'high', 'High'


class Todo(models.Model):
    """
    A single task owned by one user.

    `category` is the category's *name* copied at write time, not a
    reference; renaming a category would not touch existing todos.
    Completion only changes through toggle.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)  # Owner (identity.User), no FK

    text = models.CharField(max_length=500)
    description = models.TextField(null=True, blank=True)
    is_completed = models.BooleanField(default=False)
    category = models.CharField(max_length=100)
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM
    )
    deadline = models.BigIntegerField(
        null=True,
        blank=True,
        help_text="Milliseconds since the Unix epoch"
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_id', 'category'], name='todo_user_category_idx'),
            models.Index(fields=['user_id', 'priority'], name='todo_user_priority_idx'),
            models.Index(fields=['user_id', 'is_completed'], name='todo_user_completed_idx'),
        ]

    def __str__(self):
        return f"{self.text} ({self.category}, {self.priority})"
