"""
Test cases for categories, difficulty levels and question authoring.
"""
from quizhub import db
from quizhub.content.models import Question


def _question_payload(content, **overrides):
    payload = {
        'category_id': content['category_id'],
        'difficulty_id': content['difficulty_id'],
        'question_text': 'What is the past tense of "go"?',
        'explanation': 'Irregular verb',
        'options': [
            {'option_text': 'goed', 'is_correct': False},
            {'option_text': 'went', 'is_correct': True},
            {'option_text': 'gone', 'is_correct': False},
        ],
    }
    payload.update(overrides)
    return payload


class TestCategories:

    def test_tutor_creates_category(self, client, users, login):
        login('tina')
        response = client.post('/api/categories', json={'name': 'Grammar', 'description': 'Tenses'})
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['name'] == 'Grammar'
        assert data['created_by'] == users['tutor']

    def test_duplicate_category_conflicts(self, client, users, login):
        login('tina')
        client.post('/api/categories', json={'name': 'Grammar'})
        response = client.post('/api/categories', json={'name': 'Grammar'})
        assert response.status_code == 409

    def test_students_cannot_manage_categories(self, client, users, login):
        login('alice')
        response = client.post('/api/categories', json={'name': 'Grammar'})
        assert response.status_code == 403
        assert response.get_json()['error'] == 'Access denied'

    def test_delete_is_soft(self, app, client, users, login):
        login('tina')
        category_id = client.post('/api/categories', json={'name': 'Grammar'}).get_json()['data']['id']
        assert client.delete(f'/api/categories/{category_id}').status_code == 200

        assert client.get('/api/categories').get_json()['data'] == []
        listed = client.get('/api/categories?include_inactive=true').get_json()['data']
        assert [(c['id'], c['is_active']) for c in listed] == [(category_id, False)]

    def test_blank_name_rejected(self, client, users, login):
        login('tina')
        response = client.post('/api/categories', json={'name': '   '})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Category name is required'


class TestDifficultyLevels:

    def test_only_super_tutors_manage_levels(self, client, users, login):
        login('tina')
        assert client.post('/api/difficulty-levels', json={'name': 'Beginner'}).status_code == 403

        login('sam')
        response = client.post('/api/difficulty-levels', json={'name': 'Beginner', 'order_index': 1})
        assert response.status_code == 201
        level_id = response.get_json()['data']['id']
        assert client.put(f'/api/difficulty-levels/{level_id}', json={'order_index': 5}).status_code == 200
        assert client.delete(f'/api/difficulty-levels/{level_id}').status_code == 200

    def test_listed_by_order_index(self, client, users, login):
        login('sam')
        client.post('/api/difficulty-levels', json={'name': 'Advanced', 'order_index': 3})
        client.post('/api/difficulty-levels', json={'name': 'Beginner', 'order_index': 1})
        client.post('/api/difficulty-levels', json={'name': 'Intermediate', 'order_index': 2})

        login('alice')
        names = [d['name'] for d in client.get('/api/difficulty-levels').get_json()['data']]
        assert names == ['Beginner', 'Intermediate', 'Advanced']


class TestQuestions:

    def test_create_question_with_options(self, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=0)
        login('tina')

        response = client.post('/api/questions', json=_question_payload(content))
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['category_name'] == 'Grammar'
        assert data['difficulty_name'] == 'Beginner'
        assert [o['option_text'] for o in data['options']] == ['goed', 'went', 'gone']
        assert [o['is_correct'] for o in data['options']] == [False, True, False]

    def test_exactly_one_correct_option(self, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=0)
        login('tina')

        two_correct = _question_payload(content, options=[
            {'option_text': 'a', 'is_correct': True},
            {'option_text': 'b', 'is_correct': True},
        ])
        response = client.post('/api/questions', json=two_correct)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Exactly one option must be marked correct'

        none_correct = _question_payload(content, options=[
            {'option_text': 'a'},
            {'option_text': 'b'},
        ])
        assert client.post('/api/questions', json=none_correct).status_code == 400

    def test_at_least_two_options(self, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=0)
        login('tina')

        response = client.post('/api/questions', json=_question_payload(content, options=[
            {'option_text': 'only', 'is_correct': True},
        ]))
        assert response.status_code == 400
        assert response.get_json()['error'] == 'A question needs at least two options'

    def test_inactive_category_rejected(self, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=0)
        login('tina')
        client.delete(f"/api/categories/{content['category_id']}")

        response = client.post('/api/questions', json=_question_payload(content))
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Category not found'

    def test_list_filters_and_paginates(self, client, users, login, make_quiz_content):
        make_quiz_content(category='Grammar', questions=12)
        vocab = make_quiz_content(category='Vocabulary', questions=3)
        login('tina')

        data = client.get('/api/questions?page=2&limit=5').get_json()['data']
        assert len(data['questions']) == 5
        assert data['pagination'] == {
            'currentPage': 2,
            'totalPages': 3,
            'totalCount': 15,
            'hasNext': True,
            'hasPrev': True,
        }

        data = client.get(f"/api/questions?category_id={vocab['category_id']}").get_json()['data']
        assert data['pagination']['totalCount'] == 3
        assert all(q['category_name'] == 'Vocabulary' for q in data['questions'])

        data = client.get('/api/questions', query_string={'search': 'GRAMMAR beginner question 1'}).get_json()['data']
        assert {q['question_text'] for q in data['questions']} == {
            'Grammar Beginner question 1',
            'Grammar Beginner question 10',
            'Grammar Beginner question 11',
            'Grammar Beginner question 12',
        }
        assert data['pagination']['totalCount'] == 4

    def test_update_replaces_options(self, app, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=1)
        question_id = content['question_ids'][0]
        login('tina')

        response = client.put(f'/api/questions/{question_id}', json={
            'question_text': 'Updated text',
            'options': [
                {'id': content['correct'][question_id], 'option_text': 'Kept', 'is_correct': False},
                {'option_text': 'New', 'is_correct': True},
            ],
        })
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['question_text'] == 'Updated text'
        assert [(o['option_text'], o['is_correct']) for o in data['options']] == [('Kept', False), ('New', True)]
        assert data['options'][0]['id'] == content['correct'][question_id]

        with app.app_context():
            assert len(db.session.get(Question, question_id).options) == 2

    def test_repeated_option_id_rejected(self, app, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=1)
        question_id = content['question_ids'][0]
        option_id = content['correct'][question_id]
        login('tina')

        response = client.put(f'/api/questions/{question_id}', json={'options': [
            {'id': option_id, 'option_text': 'A', 'is_correct': True},
            {'id': option_id, 'option_text': 'B', 'is_correct': False},
        ]})
        assert response.status_code == 400
        assert response.get_json()['error'] == f'Option {option_id} is listed more than once'

        with app.app_context():
            options = db.session.get(Question, question_id).options
            assert len(options) == 4
            assert [o.is_correct for o in options].count(True) == 1

    def test_answered_option_cannot_be_removed(self, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=1)
        question_id = content['question_ids'][0]
        login('alice')
        attempt_id = client.post('/api/quizzes/attempts', json={
            'category_id': content['category_id'], 'difficulty_id': content['difficulty_id'],
        }).get_json()['data']['attempt_id']
        client.post(f'/api/quizzes/attempts/{attempt_id}/submit', json={'answers': [
            {'question_id': question_id, 'selected_option_id': content['wrong'][question_id]},
        ]})

        login('tina')
        response = client.put(f'/api/questions/{question_id}', json={'options': [
            {'id': content['correct'][question_id], 'option_text': 'Option 0', 'is_correct': True},
            {'option_text': 'Replacement', 'is_correct': False},
        ]})
        assert response.status_code == 400
        assert 'has recorded answers' in response.get_json()['error']

    def test_soft_delete_hides_question(self, client, users, login, make_quiz_content):
        content = make_quiz_content(questions=2)
        question_id = content['question_ids'][0]
        login('tina')

        assert client.delete(f'/api/questions/{question_id}').status_code == 200
        assert client.get(f'/api/questions/{question_id}').status_code == 404
        data = client.get('/api/questions').get_json()['data']
        assert data['pagination']['totalCount'] == 1

    def test_students_cannot_read_question_bank(self, client, users, login):
        login('alice')
        assert client.get('/api/questions').status_code == 403
