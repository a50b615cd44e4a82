import json
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
from django.test import TestCase, Client

from .jwt_auth import (
    JWT_ALGORITHM,
    _secret,
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
    get_user_id_from_token,
)
from .models import User


class JWTTest(TestCase):
    def test_access_token_round_trip(self):
        user_id = uuid4()
        token = create_access_token(user_id)
        self.assertEqual(get_user_id_from_token(token), user_id)
        self.assertEqual(decode_token(token)['type'], 'access')

    def test_refresh_token_is_not_an_access_token(self):
        user_id = uuid4()
        refresh = create_refresh_token(user_id)
        self.assertIsNone(get_user_id_from_token(refresh))
        self.assertEqual(get_user_id_from_token(refresh, token_type='refresh'), user_id)

    def test_token_pair(self):
        access, refresh = create_token_pair(uuid4())
        self.assertNotEqual(access, refresh)

    def test_expired_token_is_rejected(self):
        payload = {
            'sub': str(uuid4()),
            'type': 'access',
            'exp': datetime.now(timezone.utc) - timedelta(minutes=1),
        }
        token = jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)
        self.assertIsNone(decode_token(token))
        self.assertIsNone(get_user_id_from_token(token))

    def test_garbage_token_is_rejected(self):
        self.assertIsNone(decode_token("not-a-token"))


class IdentityAPITest(TestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            username='alice', email='alice@test.com', password='testpass123',
        )

    def test_register_sets_cookies(self):
        response = self.client.post(
            '/api/identity/register',
            data=json.dumps({'username': 'bob', 'password': 'testpass123', 'email': 'bob@test.com'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['user']['username'], 'bob')
        self.assertIn('access_token', response.cookies)
        self.assertIn('refresh_token', response.cookies)
        self.assertTrue(User.objects.filter(username='bob').exists())

    def test_register_duplicate_username(self):
        response = self.client.post(
            '/api/identity/register',
            data=json.dumps({'username': 'alice', 'password': 'testpass123'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'duplicate_name')

    def test_login_and_me(self):
        response = self.client.post(
            '/api/identity/login',
            data=json.dumps({'username': 'alice', 'password': 'testpass123'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn('access_token', response.cookies)

        # The test client keeps the cookies for the next request
        me = self.client.get('/api/identity/me')
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()['username'], 'alice')

    def test_login_wrong_password(self):
        response = self.client.post(
            '/api/identity/login',
            data=json.dumps({'username': 'alice', 'password': 'wrong'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 401)

    def test_me_requires_auth(self):
        self.assertEqual(self.client.get('/api/identity/me').status_code, 401)

    def test_bearer_header(self):
        token = create_access_token(self.user.id)
        response = self.client.get('/api/identity/me', HTTP_AUTHORIZATION=f'Bearer {token}')
        self.assertEqual(response.status_code, 200)

    def test_inactive_user_is_not_resolved(self):
        self.user.is_active = False
        self.user.save()
        self.client.cookies['access_token'] = create_access_token(self.user.id)
        self.assertEqual(self.client.get('/api/identity/me').status_code, 401)

    def test_refresh(self):
        self.client.cookies['refresh_token'] = create_refresh_token(self.user.id)
        response = self.client.post('/api/identity/refresh')
        self.assertEqual(response.status_code, 200)
        self.assertIn('access_token', response.cookies)

    def test_refresh_rejects_access_token(self):
        self.client.cookies['refresh_token'] = create_access_token(self.user.id)
        response = self.client.post('/api/identity/refresh')
        self.assertEqual(response.status_code, 401)

    def test_logout_clears_cookies(self):
        self.client.cookies['access_token'] = create_access_token(self.user.id)
        response = self.client.post('/api/identity/logout')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.cookies['access_token'].value, '')
