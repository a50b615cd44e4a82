from django.contrib import admin
from .models import Todo


@admin.register(Todo)
class TodoAdmin(admin.ModelAdmin):
    list_display = ['text', 'category', 'priority', 'is_completed', 'deadline', 'user_id', 'created_at']
    list_filter = ['priority', 'is_completed']
    search_fields = ['text', 'description', 'category']
    readonly_fields = ['created_at']
