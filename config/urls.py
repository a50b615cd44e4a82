"""
URL configuration for the Task Tracker project.
"""
from django.contrib import admin
from django.urls import path
from ninja import NinjaAPI

from apps.core.exceptions import TaskTrackerError

api = NinjaAPI(
    title="Task Tracker API",
    version="1.0.0",
    description="Personal task tracking: categories, todos, filtering and search",
    docs_url="/docs",
)


@api.exception_handler(TaskTrackerError)
def handle_task_tracker_error(request, exc: TaskTrackerError):
    """Render domain errors as {"detail", "code"} with the error's status."""
    return api.create_response(
        request,
        {"detail": exc.message, "code": exc.code},
        status=exc.status_code,
    )


from apps.identity.api import router as identity_router
from apps.categories.api import router as categories_router
from apps.todos.api import router as todos_router

api.add_router("/identity/", identity_router)
api.add_router("/categories/", categories_router)
api.add_router("/todos/", todos_router)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]
