"""
Test cases for user management endpoints.
"""
from conftest import PASSWORD


class TestListUsers:

    def test_tutor_lists_active_users(self, client, users, make_user, login):
        make_user('dormant', is_active=False)
        login('tina')

        names = {u['username'] for u in client.get('/api/users').get_json()['data']}
        assert names == {'alice', 'bob', 'tina', 'sam'}

        names = {u['username'] for u in client.get('/api/users?include_inactive=true').get_json()['data']}
        assert 'dormant' in names

    def test_filter_by_role_and_search(self, client, users, login):
        login('tina')
        students = client.get('/api/users?role=student').get_json()['data']
        assert {u['username'] for u in students} == {'alice', 'bob'}

        found = client.get('/api/users?search=ALI').get_json()['data']
        assert [u['username'] for u in found] == ['alice']

        assert client.get('/api/users?role=wizard').status_code == 400

    def test_emails_only_shown_to_super_tutors(self, client, users, login):
        login('tina')
        assert all('email' not in u for u in client.get('/api/users').get_json()['data'])

        login('sam')
        assert all('email' in u for u in client.get('/api/users').get_json()['data'])

    def test_students_cannot_list_users(self, client, users, login):
        login('alice')
        assert client.get('/api/users').status_code == 403


class TestProfiles:

    def test_read_own_profile_only(self, client, users, login):
        login('alice')
        assert client.get(f"/api/users/{users['student']}").status_code == 200
        response = client.get(f"/api/users/{users['other_student']}")
        assert response.status_code == 404
        assert response.get_json()['error'] == 'User not found'

    def test_lookup_by_username(self, client, users, login):
        login('tina')
        response = client.get('/api/users/by-username/Alice')
        assert response.status_code == 200
        assert response.get_json()['data']['id'] == users['student']
        assert client.get('/api/users/by-username/nobody').status_code == 404

    def test_update_own_names(self, client, users, login):
        login('alice')
        response = client.put(f"/api/users/{users['student']}", json={
            'first_name': 'Alicia',
            'avatar_url': '/api/storage/objects/avatars/1/me.png',
        })
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['first_name'] == 'Alicia'
        assert data['avatar_url'] == '/api/storage/objects/avatars/1/me.png'

    def test_cannot_change_own_role_or_status(self, client, users, login):
        login('alice')
        assert client.put(f"/api/users/{users['student']}", json={'role': 'tutor'}).status_code == 403
        assert client.put(f"/api/users/{users['student']}", json={'is_active': False}).status_code == 403

    def test_tutor_cannot_edit_others(self, client, users, login):
        login('tina')
        response = client.put(f"/api/users/{users['student']}", json={'first_name': 'X'})
        assert response.status_code == 403

    def test_super_tutor_changes_role(self, client, users, login):
        login('sam')
        response = client.put(f"/api/users/{users['student']}", json={'role': 'tutor'})
        assert response.status_code == 200
        assert response.get_json()['data']['role'] == 'tutor'

        response = client.put(f"/api/users/{users['super_tutor']}", json={'role': 'student'})
        assert response.status_code == 400

    def test_username_change_conflict(self, client, users, login):
        login('sam')
        response = client.put(f"/api/users/{users['student']}", json={'username': 'BOB'})
        assert response.status_code == 409

    def test_non_string_identity_fields_rejected(self, client, users, login):
        login('sam')
        response = client.put(f"/api/users/{users['student']}", json={'username': 7})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Username must be a string'

        response = client.put(f"/api/users/{users['student']}", json={'email': ['a@example.com']})
        assert response.status_code == 400


class TestCreateAndDeactivate:

    def test_super_tutor_creates_tutor(self, client, users, login):
        login('sam')
        response = client.post('/api/users', json={
            'email': 'tom@example.com',
            'username': 'tom',
            'password': PASSWORD,
            'first_name': 'Tom',
            'last_name': 'Tutor',
            'role': 'tutor',
        })
        assert response.status_code == 201
        assert response.get_json()['data']['role'] == 'tutor'

    def test_tutor_cannot_create_users(self, client, users, login):
        login('tina')
        response = client.post('/api/users', json={
            'email': 'tom@example.com', 'username': 'tom', 'password': PASSWORD,
        })
        assert response.status_code == 403

    def test_deactivated_user_cannot_log_in(self, client, users, login):
        login('sam')
        assert client.delete(f"/api/users/{users['student']}").status_code == 200

        response = client.post('/api/auth/login', json={'identifier': 'alice', 'password': PASSWORD})
        assert response.status_code == 401

    def test_super_tutor_cannot_deactivate_self(self, client, users, login):
        login('sam')
        response = client.delete(f"/api/users/{users['super_tutor']}")
        assert response.status_code == 400
        assert response.get_json()['error'] == 'You cannot deactivate your own account'


class TestStudentsForTutor:

    def test_roster_includes_attempt_stats(self, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=2)
        login('alice')
        attempt_id = client.post('/api/quizzes/attempts', json={
            'category_id': content['category_id'], 'difficulty_id': content['difficulty_id'],
        }).get_json()['data']['attempt_id']
        first = content['question_ids'][0]
        client.post(f'/api/quizzes/attempts/{attempt_id}/submit', json={'answers': [
            {'question_id': first, 'selected_option_id': content['correct'][first]},
        ]})

        login('tina')
        response = client.get('/api/users/students')
        assert response.status_code == 200
        roster = {s['username']: s for s in response.get_json()['data']}
        assert list(roster) == ['alice', 'bob']
        assert roster['alice']['total_attempts'] == 1
        assert roster['alice']['average_score'] == 50.0
        assert roster['alice']['last_activity'] is not None
        assert roster['bob']['total_attempts'] == 0
        assert roster['bob']['average_score'] == 0.0
        assert roster['bob']['last_activity'] is None

    def test_students_cannot_see_roster(self, client, users, login):
        login('alice')
        assert client.get('/api/users/students').status_code == 403
