"""
Integration tests for todo API endpoints.
Tests API responses, auth handling, and end-to-end flows.
"""
import json
from datetime import timedelta

from django.test import TestCase, Client
from django.utils import timezone

from apps.identity.jwt_auth import create_access_token
from apps.identity.models import User
from apps.todos.dtos import current_millis
from apps.todos.models import Todo


DAY_MS = 24 * 60 * 60 * 1000


class TodoAPITest(TestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='alice', password='testpass123')
        self.other = User.objects.create_user(username='bob', password='testpass123')

    def login(self, user):
        self.client.cookies['access_token'] = create_access_token(user.id)

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json')

    def patch_json(self, url, payload):
        return self.client.patch(url, data=json.dumps(payload), content_type='application/json')

    def add(self, **fields):
        payload = {'text': 'Buy milk', 'category': 'Home', 'priority': 'low'}
        payload.update(fields)
        response = self.post_json('/api/todos/', payload)
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_list_anonymous_returns_empty(self):
        Todo.objects.create(user_id=self.user.id, text="Buy milk", category="Home", priority="low")
        response = self.client.get('/api/todos/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_add_requires_auth(self):
        response = self.post_json('/api/todos/', {'text': 'x', 'category': 'Home', 'priority': 'low'})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['code'], 'unauthenticated')

    def test_add_validates_priority(self):
        self.login(self.user)
        response = self.post_json('/api/todos/', {'text': 'x', 'category': 'Home', 'priority': 'urgent'})
        self.assertEqual(response.status_code, 422)

    def test_add_ignores_completion(self):
        self.login(self.user)
        data = self.add(is_completed=True)
        self.assertFalse(data['is_completed'])
        self.assertFalse(data['is_overdue'])

    def test_category_scenario(self):
        self.login(self.user)
        self.post_json('/api/categories/', {'name': 'Work', 'color': '#f00'})
        self.post_json('/api/categories/', {'name': 'Home', 'color': '#0f0'})
        self.add(text='Buy milk', category='Home', priority='low')

        self.assertEqual(self.client.get('/api/todos/', {'category': 'Work'}).json(), [])
        home = self.client.get('/api/todos/', {'category': 'Home'}).json()
        self.assertEqual([t['text'] for t in home], ['Buy milk'])

    def test_filters_and_search(self):
        self.login(self.user)
        self.add(text='Write report', category='Work', priority='high')
        self.add(text='Answer email', category='Work', priority='low')
        milk = self.add(text='Buy milk', category='Home', priority='low')
        self.add(text='Buy oat milk', category='Home', priority='high')

        work_high = self.client.get('/api/todos/', {'category': 'Work', 'priority': 'high'}).json()
        self.assertEqual([t['text'] for t in work_high], ['Write report'])

        low_milk = self.client.get('/api/todos/', {'search': 'milk', 'priority': 'low'}).json()
        self.assertEqual([t['id'] for t in low_milk], [milk['id']])

        self.post_json(f"/api/todos/{milk['id']}/toggle", {})
        open_milk = self.client.get('/api/todos/', {'search': 'milk', 'completed': 'false'}).json()
        self.assertEqual([t['text'] for t in open_milk], ['Buy oat milk'])

    def test_update_partial(self):
        self.login(self.user)
        todo = self.add(description='2 litres', deadline=1_700_000_000_000)

        response = self.patch_json(f"/api/todos/{todo['id']}", {'priority': 'high'})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['priority'], 'high')
        for field in ('text', 'description', 'category', 'deadline', 'is_completed', 'created_at'):
            self.assertEqual(data[field], todo[field])

    def test_update_rejects_null_required_field(self):
        self.login(self.user)
        todo = self.add()
        response = self.patch_json(f"/api/todos/{todo['id']}", {'text': None})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(Todo.objects.get(id=todo['id']).text, 'Buy milk')

    def test_toggle_twice(self):
        self.login(self.user)
        todo = self.add()
        url = f"/api/todos/{todo['id']}/toggle"

        self.assertTrue(self.client.post(url).json()['is_completed'])
        self.assertFalse(self.client.post(url).json()['is_completed'])

    def test_ownership_errors(self):
        self.login(self.user)
        todo = self.add()

        self.login(self.other)
        self.assertEqual(self.patch_json(f"/api/todos/{todo['id']}", {'text': 'mine'}).status_code, 403)
        self.assertEqual(self.client.post(f"/api/todos/{todo['id']}/toggle").status_code, 403)
        response = self.client.delete(f"/api/todos/{todo['id']}")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['code'], 'forbidden')

        stored = Todo.objects.get(id=todo['id'])
        self.assertEqual(stored.text, 'Buy milk')
        self.assertFalse(stored.is_completed)

    def test_delete(self):
        self.login(self.user)
        todo = self.add()
        self.assertEqual(self.client.delete(f"/api/todos/{todo['id']}").status_code, 204)
        response = self.client.delete(f"/api/todos/{todo['id']}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['code'], 'not_found')

    def test_overdue_flag_and_stats(self):
        self.login(self.user)
        self.add(text='Pay rent', deadline=current_millis() - DAY_MS)
        self.add(text='Plan trip', deadline=current_millis() + DAY_MS)
        done = self.add(text='Old chore', deadline=current_millis() - DAY_MS)
        self.client.post(f"/api/todos/{done['id']}/toggle")

        listed = {t['text']: t['is_overdue'] for t in self.client.get('/api/todos/').json()}
        self.assertEqual(listed, {'Pay rent': True, 'Plan trip': False, 'Old chore': False})

        stats = self.client.get('/api/todos/stats').json()
        self.assertEqual(stats, {'total': 3, 'completed': 1, 'overdue': 1})

    def test_list_is_newest_first(self):
        self.login(self.user)
        now = timezone.now()
        for minutes_ago, text in [(30, 'first'), (20, 'second'), (10, 'third')]:
            Todo.objects.create(
                user_id=self.user.id, text=text, category='Home', priority='low',
                created_at=now - timedelta(minutes=minutes_ago),
            )
        texts = [t['text'] for t in self.client.get('/api/todos/').json()]
        self.assertEqual(texts, ['third', 'second', 'first'])
