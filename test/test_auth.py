"""
Test cases for authentication functionality.
"""
from conftest import PASSWORD
from quizhub.auth.models import Role


def _register(client, **overrides):
    payload = {
        'email': 'new@example.com',
        'password': PASSWORD,
        'username': 'newbie',
        'first_name': 'New',
        'last_name': 'User',
    }
    payload.update(overrides)
    return client.post('/api/auth/register', json=payload)


class TestUserRegistration:

    def test_register_creates_student(self, client):
        response = _register(client)
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['role'] == 'student'
        assert data['email'] == 'new@example.com'
        assert 'password_hash' not in data

    def test_register_missing_fields(self, client):
        response = client.post('/api/auth/register', json={'email': 'new@example.com'})
        assert response.status_code == 400

    def test_register_invalid_email(self, client):
        response = _register(client, email='invalid-email')
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Please provide a valid email address'

    def test_register_weak_password(self, client):
        response = _register(client, password='short')
        assert response.status_code == 400
        assert 'at least 8 characters' in response.get_json()['error']

    def test_duplicate_email_conflicts(self, client, make_user):
        make_user('alice')
        response = _register(client, email='alice@example.com')
        assert response.status_code == 409

    def test_duplicate_username_is_case_insensitive(self, client, make_user):
        make_user('alice')
        response = _register(client, username='ALICE')
        assert response.status_code == 409
        assert response.get_json()['error'] == (
            'Username ALICE already exists. Please choose a different username.'
        )

    def test_privileged_role_needs_super_tutor(self, client, make_user, login):
        assert _register(client, role='tutor').status_code == 403

        make_user('sam', Role.SUPER_TUTOR)
        login('sam')
        response = _register(client, role='tutor')
        assert response.status_code == 201
        assert response.get_json()['data']['role'] == 'tutor'

    def test_invalid_role(self, client):
        response = _register(client, role='wizard')
        assert response.status_code == 400

    def test_non_string_fields_rejected(self, client):
        response = _register(client, email=5)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Email must be a string'

        assert _register(client, username=['newbie']).status_code == 400
        assert _register(client, password=12345678).status_code == 400


class TestUserLogin:

    def test_login_with_username_or_email(self, client, make_user):
        make_user('alice')
        for identifier in ('alice', 'alice@example.com'):
            response = client.post('/api/auth/login', json={'identifier': identifier, 'password': PASSWORD})
            assert response.status_code == 200
            assert response.get_json()['data']['username'] == 'alice'

    def test_login_missing_fields(self, client):
        response = client.post('/api/auth/login', json={'identifier': 'alice'})
        assert response.status_code == 400

    def test_non_string_credentials_rejected(self, client, make_user):
        make_user('alice')
        response = client.post('/api/auth/login', json={'identifier': 42, 'password': PASSWORD})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Identifier must be a string'

        response = client.post('/api/auth/login', json={'identifier': 'alice', 'password': 42})
        assert response.status_code == 400

        response = client.post('/api/auth/username-lookup', json={'username': {'name': 'alice'}})
        assert response.status_code == 400

    def test_wrong_password(self, client, make_user):
        make_user('alice')
        response = client.post('/api/auth/login', json={'identifier': 'alice', 'password': 'Wrong!Pass42'})
        assert response.status_code == 401
        assert response.get_json() == {'success': False, 'error': 'Invalid login credentials'}

    def test_inactive_user_cannot_log_in(self, client, make_user):
        make_user('alice', is_active=False)
        response = client.post('/api/auth/login', json={'identifier': 'alice@example.com', 'password': PASSWORD})
        assert response.status_code == 401

    def test_me_and_logout(self, client, make_user, login):
        assert client.get('/api/auth/me').status_code == 401

        make_user('alice')
        login('alice')
        response = client.get('/api/auth/me')
        assert response.status_code == 200
        assert response.get_json()['data']['username'] == 'alice'

        assert client.post('/api/auth/logout').status_code == 200
        assert client.get('/api/auth/me').status_code == 401


class TestUsernameLookup:

    def test_lookup_returns_email(self, client, make_user):
        user_id = make_user('alice')
        response = client.post('/api/auth/username-lookup', json={'username': 'alice'})
        assert response.status_code == 200
        assert response.get_json()['data'] == {'email': 'alice@example.com', 'user_id': user_id}

    def test_lookup_unknown_or_inactive(self, client, make_user):
        make_user('ghost', is_active=False)
        for username in ('nobody', 'ghost'):
            response = client.post('/api/auth/username-lookup', json={'username': username})
            assert response.status_code == 404
            assert response.get_json()['error'] == 'Username not found'

    def test_username_availability(self, client, make_user):
        make_user('alice')
        response = client.get('/api/auth/username-available?username=Alice')
        assert response.get_json()['data'] == {'available': False, 'username': 'Alice'}
        response = client.get('/api/auth/username-available?username=carol')
        assert response.get_json()['data'] == {'available': True, 'username': 'carol'}
