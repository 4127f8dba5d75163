"""
Tests for Authentication API Endpoints
"""
import pytest
from httpx import AsyncClient
from faker import Faker

fake = Faker()


class TestUserRegistration:
    """Test user registration endpoint"""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient):
        """Test successful user registration"""
        user_data = {
            'email': fake.unique.email(),
            'password': 'securePassword123!',
            'full_name': fake.name(),
        }

        response = await client.post('/api/v1/auth/register', json=user_data)

        assert response.status_code == 201
        data = response.json()
        assert data['email'] == user_data['email']
        assert data['is_active'] is True
        assert 'hashed_password' not in data

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, test_user):
        """Test registration with duplicate email fails"""
        response = await client.post('/api/v1/auth/register', json={
            'email': test_user.email,
            'password': 'securePassword123!',
        })

        assert response.status_code == 400
        assert 'already registered' in response.json()['detail'].lower()

    @pytest.mark.asyncio
    async def test_register_short_password(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/register', json={
            'email': fake.unique.email(),
            'password': 'short',
        })

        assert response.status_code == 422


class TestUserLogin:
    """Test login endpoint"""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, test_user):
        """Test login returns a usable bearer token"""
        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email,
            'password': 'testpassword123',
        })

        assert response.status_code == 200
        token = response.json()['access_token']
        assert response.json()['token_type'] == 'bearer'

        me = await client.get('/api/v1/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert me.status_code == 200
        assert me.json()['email'] == test_user.email
        assert me.json()['last_login'] is not None

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_user):
        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email,
            'password': 'wrongpassword',
        })

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/login', json={
            'email': fake.unique.email(),
            'password': 'whatever123',
        })

        assert response.status_code == 401


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient):
        """Test protected routes reject anonymous callers"""
        response = await client.get('/api/v1/auth/me')
        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_me_with_garbage_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
        assert response.status_code == 401
        assert response.json()['error']['code'] == 'AUTH_FAILED'
