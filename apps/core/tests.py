from uuid import uuid4

from django.db import transaction
from django.test import TestCase

from apps.categories.models import Category
from apps.todos.models import Todo
from .authorization import get_owned_or_raise, require_user
from .exceptions import (
    DuplicateName, Forbidden, InUse, NotFound, TaskTrackerError, Unauthenticated,
)


class ErrorTaxonomyTest(TestCase):
    def test_status_codes(self):
        self.assertEqual(Unauthenticated.status_code, 401)
        self.assertEqual(Forbidden.status_code, 403)
        self.assertEqual(NotFound.status_code, 404)
        self.assertEqual(DuplicateName.status_code, 409)
        self.assertEqual(InUse.status_code, 409)

    def test_default_and_custom_messages(self):
        self.assertEqual(str(Unauthenticated()), "Authentication required")
        err = NotFound("Todo not found")
        self.assertEqual(err.message, "Todo not found")
        self.assertEqual(err.code, "not_found")
        self.assertIsInstance(err, TaskTrackerError)


class AuthorizationGateTest(TestCase):
    def setUp(self):
        self.owner_id = uuid4()
        self.other_id = uuid4()
        self.todo = Todo.objects.create(
            user_id=self.owner_id, text="Buy milk", category="Home", priority="low",
        )

    def test_require_user(self):
        self.assertEqual(require_user(self.owner_id), self.owner_id)
        with self.assertRaises(Unauthenticated):
            require_user(None)

    def test_owner_gets_resource(self):
        todo = get_owned_or_raise(Todo, self.todo.id, self.owner_id)
        self.assertEqual(todo.pk, self.todo.pk)

    def test_owner_gets_resource_inside_transaction(self):
        with transaction.atomic():
            todo = get_owned_or_raise(Todo, self.todo.id, self.owner_id)
        self.assertEqual(todo.pk, self.todo.pk)

    def test_missing_resource_is_not_found(self):
        with self.assertRaisesMessage(NotFound, "Todo not found"):
            get_owned_or_raise(Todo, uuid4(), self.owner_id)

    def test_other_user_is_forbidden(self):
        with self.assertRaises(Forbidden):
            get_owned_or_raise(Todo, self.todo.id, self.other_id)

    def test_anonymous_is_unauthenticated_before_lookup(self):
        # Identity is checked first, even for ids that don't exist
        with self.assertRaises(Unauthenticated):
            get_owned_or_raise(Todo, uuid4(), None)

    def test_same_rule_applies_to_categories(self):
        category = Category.objects.create(user_id=self.owner_id, name="Work", color="#f00")
        with self.assertRaisesMessage(NotFound, "Category not found"):
            get_owned_or_raise(Category, uuid4(), self.owner_id)
        with self.assertRaises(Forbidden):
            get_owned_or_raise(Category, category.id, self.other_id)


class LambdaHandlerTest(TestCase):
    def test_lambda_handler_wraps_asgi_app(self):
        from mangum import Mangum
        from config.asgi import get_lambda_handler

        self.assertIsInstance(get_lambda_handler(), Mangum)
