import json
from io import StringIO
from uuid import uuid4

from django.core.management import call_command
from django.test import TestCase, Client

from apps.core.exceptions import DuplicateName, Forbidden, InUse, NotFound, Unauthenticated
from apps.identity.jwt_auth import create_access_token
from apps.identity.models import User
from apps.todos.models import Todo
from .models import Category
from . import services


class CategoryServiceTest(TestCase):
    def setUp(self):
        self.user_id = uuid4()
        self.other_id = uuid4()

    def test_add_and_list(self):
        services.add_category(self.user_id, "Work", "#f00")
        services.add_category(self.user_id, "Home", "#0f0")
        services.add_category(self.other_id, "Garden", "#00f")

        names = {c.name for c in services.list_categories(self.user_id)}
        self.assertEqual(names, {"Work", "Home"})

    def test_list_anonymous_is_empty(self):
        services.add_category(self.user_id, "Work", "#f00")
        self.assertEqual(services.list_categories(None), [])

    def test_add_requires_user(self):
        with self.assertRaises(Unauthenticated):
            services.add_category(None, "Work", "#f00")

    def test_duplicate_name_rejected(self):
        services.add_category(self.user_id, "Work", "#f00")
        with self.assertRaises(DuplicateName):
            services.add_category(self.user_id, "Work", "#123")
        self.assertEqual(Category.objects.filter(user_id=self.user_id).count(), 1)

    def test_duplicate_check_is_case_sensitive_and_per_user(self):
        services.add_category(self.user_id, "Work", "#f00")
        services.add_category(self.user_id, "work", "#f00")
        services.add_category(self.other_id, "Work", "#f00")
        self.assertEqual(Category.objects.filter(name__iexact="work").count(), 3)

    def test_remove(self):
        category = services.add_category(self.user_id, "Work", "#f00")
        services.remove_category(self.user_id, category.id)
        self.assertFalse(Category.objects.filter(id=category.id).exists())

    def test_remove_missing(self):
        with self.assertRaises(NotFound):
            services.remove_category(self.user_id, uuid4())

    def test_remove_other_users_category(self):
        category = services.add_category(self.user_id, "Work", "#f00")
        with self.assertRaises(Forbidden):
            services.remove_category(self.other_id, category.id)
        self.assertTrue(Category.objects.filter(id=category.id).exists())

    def test_remove_blocked_while_in_use(self):
        category = services.add_category(self.user_id, "Work", "#f00")
        todo = Todo.objects.create(user_id=self.user_id, text="Report", category="Work", priority="high")

        with self.assertRaises(InUse):
            services.remove_category(self.user_id, category.id)
        self.assertTrue(Category.objects.filter(id=category.id).exists())

        todo.delete()
        services.remove_category(self.user_id, category.id)
        self.assertFalse(Category.objects.filter(id=category.id).exists())

    def test_other_users_todos_do_not_block_removal(self):
        category = services.add_category(self.user_id, "Work", "#f00")
        Todo.objects.create(user_id=self.other_id, text="Report", category="Work", priority="high")

        services.remove_category(self.user_id, category.id)
        self.assertFalse(Category.objects.filter(id=category.id).exists())

    def test_seed_defaults_skips_existing(self):
        services.add_category(self.user_id, "Work", "#000")

        created = services.seed_default_categories(self.user_id)

        self.assertEqual([c.name for c in created], ["Personal", "Shopping", "Health"])
        work = Category.objects.get(user_id=self.user_id, name="Work")
        self.assertEqual(work.color, "#000")
        self.assertEqual(services.seed_default_categories(self.user_id), [])


class SeedCategoriesCommandTest(TestCase):
    def test_seed_for_username(self):
        user = User.objects.create_user(username="alice", password="testpass123")
        out = StringIO()

        call_command('seed_categories', username='alice', stdout=out)

        self.assertEqual(Category.objects.filter(user_id=user.id).count(), 4)
        self.assertIn('Seeded 4 categories for 1 users', out.getvalue())


class CategoryAPITest(TestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='alice', password='testpass123')
        self.other = User.objects.create_user(username='bob', password='testpass123')

    def login(self, user):
        self.client.cookies['access_token'] = create_access_token(user.id)

    def post_category(self, name, color="#f00"):
        return self.client.post(
            '/api/categories/',
            data=json.dumps({'name': name, 'color': color}),
            content_type='application/json',
        )

    def test_list_anonymous_returns_empty(self):
        Category.objects.create(user_id=self.user.id, name="Work", color="#f00")
        response = self.client.get('/api/categories/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_add_requires_auth(self):
        response = self.post_category("Work")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['code'], 'unauthenticated')

    def test_add_and_list(self):
        self.login(self.user)
        response = self.post_category("Work")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['name'], "Work")

        listed = self.client.get('/api/categories/').json()
        self.assertEqual([c['name'] for c in listed], ["Work"])

    def test_add_duplicate(self):
        self.login(self.user)
        self.post_category("Work")
        response = self.post_category("Work")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'duplicate_name')

    def test_delete_flow(self):
        category = Category.objects.create(user_id=self.user.id, name="Work", color="#f00")
        Todo.objects.create(user_id=self.user.id, text="Report", category="Work", priority="high")

        self.login(self.other)
        self.assertEqual(self.client.delete(f'/api/categories/{category.id}').status_code, 403)

        self.login(self.user)
        response = self.client.delete(f'/api/categories/{category.id}')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'in_use')

        Todo.objects.filter(user_id=self.user.id).delete()
        self.assertEqual(self.client.delete(f'/api/categories/{category.id}').status_code, 204)
        self.assertEqual(self.client.delete(f'/api/categories/{category.id}').status_code, 404)

    def test_color_is_free_form_up_to_column_size(self):
        self.login(self.user)
        self.assertEqual(self.post_category("Work", color="sky blue").status_code, 201)
        response = self.post_category("Home", color="x" * 33)
        self.assertEqual(response.status_code, 422)
        self.assertFalse(Category.objects.filter(name="Home").exists())

    def test_seed_defaults(self):
        self.login(self.user)
        response = self.client.post('/api/categories/defaults')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 4)
