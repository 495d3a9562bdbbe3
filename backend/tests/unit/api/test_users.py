"""
Unit Tests for the profile endpoint
"""
import pytest
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient
from jose import jwt

from app.core.config import settings
from app.core.security import create_access_token


INVALID_TOKEN = {'success': False, 'message': 'Invalid token'}


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_profile(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get('/api/user/profile', headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['message'] == 'Profile retrieved successfully'

        user = body['data']['user']
        assert user['id'] == test_user.id
        assert user['email'] == test_user.email
        assert user['firstName'] == test_user.first_name
        assert user['lastName'] == test_user.last_name
        assert user['userType'] == 'student'
        assert datetime.fromisoformat(user['createdAt'])
        assert 'passwordHash' not in user

    @pytest.mark.asyncio
    async def test_profile_with_token_from_registration(self, client: AsyncClient):
        registered = await client.post('/api/auth/register', json={
            'email': 'a@b.com',
            'password': 'password1',
            'confirmPassword': 'password1',
            'firstName': 'Jo',
            'lastName': 'Li',
        })
        token = registered.json()['data']['token']

        response = await client.get('/api/user/profile', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 200
        assert response.json()['data']['user']['email'] == 'a@b.com'

    @pytest.mark.asyncio
    async def test_no_token(self, client: AsyncClient):
        response = await client.get('/api/user/profile')

        assert response.status_code == 401
        assert response.json() == {'success': False, 'message': 'No token provided'}

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self, client: AsyncClient):
        response = await client.get('/api/user/profile', headers={'Authorization': 'Basic dXNlcjpwYXNz'})

        assert response.status_code == 401
        assert response.json()['message'] == 'No token provided'

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get('/api/user/profile', headers={'Authorization': 'Bearer garbage'})

        assert response.status_code == 401
        assert response.json() == INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_expired_token(self, client: AsyncClient, test_user):
        token = create_access_token(
            {
                'userId': test_user.id,
                'email': test_user.email,
                'firstName': test_user.first_name,
                'lastName': test_user.last_name,
            },
            issued_at=datetime.now(timezone.utc) - timedelta(hours=25),
        )

        response = await client.get('/api/user/profile', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.json() == INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret(self, client: AsyncClient, test_user):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode(
            {
                'userId': test_user.id,
                'email': test_user.email,
                'firstName': test_user.first_name,
                'lastName': test_user.last_name,
                'iat': now,
                'exp': now + 3600,
            },
            'some-other-secret',
            algorithm=settings.JWT_ALGORITHM,
        )

        response = await client.get('/api/user/profile', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.json() == INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_user_no_longer_exists(self, client: AsyncClient):
        token = create_access_token({
            'userId': 9999,
            'email': 'gone@b.com',
            'firstName': 'Jo',
            'lastName': 'Li',
        })

        response = await client.get('/api/user/profile', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'User not found'}
