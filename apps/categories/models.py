import uuid
from django.db import models


class Category(models.Model):
    """
    A user's label for grouping todos.

    Todos copy the category *name* rather than referencing the id, so a
    category can only be deleted once no todo of its owner carries that name.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)  # Owner (identity.User), no FK

    name = models.CharField(max_length=100)
    color = models.CharField(max_length=32, help_text="Display hint, e.g. #3B82F6")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = "Categories"
        constraints = [
            models.UniqueConstraint(fields=['user_id', 'name'], name='unique_category_name_per_user'),
        ]

    def __str__(self):
        return self.name
