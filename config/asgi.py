"""
ASGI config for the Task Tracker.

Serves traditional ASGI servers (Uvicorn, Daphne) through `application`
and AWS Lambda behind API Gateway through `lambda_handler` (Mangum).
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

from django.core.asgi import get_asgi_application

# Initialized at import time so Lambda pays the cost at container startup.
application = get_asgi_application()


def get_lambda_handler():
    """Returns a Mangum-wrapped handler for AWS Lambda."""
    from mangum import Mangum
    return Mangum(application, lifespan="off")


_lambda_handler = None


def lambda_handler(event, context):
    """
    AWS Lambda entry point for HTTP requests.

    The Mangum adapter is created on first invocation and reused while
    the container stays warm.
    """
    global _lambda_handler
    if _lambda_handler is None:
        _lambda_handler = get_lambda_handler()
    return _lambda_handler(event, context)
