"""
Pytest configuration and fixtures for testing.

Every test gets a fresh application backed by an in-memory SQLite database.
Factories create rows inside their own app context and return plain ids, so
no app context stays pushed while the test client makes requests.
"""
import os

import pytest

os.environ.setdefault('SECRET_KEY', 'test-secret-key-not-for-production')

from quizhub import create_app, db  # noqa: E402
from quizhub.auth.models import Role, User  # noqa: E402
from quizhub.auth.utils import hash_password  # noqa: E402
from quizhub.content.models import Category, DifficultyLevel, Question, QuestionOption  # noqa: E402
from quizhub.security import get_rate_limiter  # noqa: E402

PASSWORD = 'Quiz!Pass42'


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Create application for testing."""
    monkeypatch.setenv('FLASK_ENV', 'testing')
    monkeypatch.setenv('SECRET_KEY', 'test-secret-key-not-for-production')
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///:memory:')
    monkeypatch.setenv('BCRYPT_ROUNDS', '4')
    monkeypatch.setenv('RATE_LIMIT_ENABLED', 'false')
    monkeypatch.setenv('UPLOAD_DIR', str(tmp_path / 'uploads'))

    app = create_app()
    app.config['TESTING'] = True

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
    get_rate_limiter().reset()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Factory: make_user('alice', Role.TUTOR) -> user id."""
    def _make(username, role=Role.STUDENT, password=PASSWORD, is_active=True,
              first_name=None, last_name='Tester'):
        with app.app_context():
            user = User(
                email=f'{username}@example.com',
                username=username,
                password_hash=hash_password(password),
                first_name=first_name or username.capitalize(),
                last_name=last_name,
                role=role,
                is_active=is_active,
            )
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture
def login(client):
    """Log the test client in; returns the user payload."""
    def _login(username, password=PASSWORD):
        response = client.post('/api/auth/login', json={'identifier': username, 'password': password})
        assert response.status_code == 200, response.get_json()
        return response.get_json()['data']
    return _login


@pytest.fixture
def make_quiz_content(app):
    """
    Factory for a category/difficulty pair with `questions` four-option
    questions. The first option of each question is the correct one.

    Returns ids: category_id, difficulty_id, question_ids, and per question
    the correct option id and one wrong option id.
    """
    def _make(category='Grammar', difficulty='Beginner', questions=3, order_index=1):
        with app.app_context():
            cat = Category.query.filter_by(name=category).first()
            if cat is None:
                cat = Category(name=category, description=f'{category} questions')
                db.session.add(cat)
            level = DifficultyLevel.query.filter_by(name=difficulty).first()
            if level is None:
                level = DifficultyLevel(name=difficulty, order_index=order_index)
                db.session.add(level)
            db.session.flush()

            created = []
            for i in range(questions):
                question = Question(
                    category_id=cat.id,
                    difficulty_id=level.id,
                    question_text=f'{category} {difficulty} question {i + 1}',
                    explanation=f'Explanation {i + 1}',
                )
                question.options = [
                    QuestionOption(option_text=f'Option {j}', is_correct=(j == 0), order_index=j)
                    for j in range(4)
                ]
                db.session.add(question)
                created.append(question)
            db.session.commit()

            return {
                'category_id': cat.id,
                'difficulty_id': level.id,
                'question_ids': [q.id for q in created],
                'correct': {q.id: q.options[0].id for q in created},
                'wrong': {q.id: q.options[1].id for q in created},
            }
    return _make


@pytest.fixture
def users(make_user):
    """A student, a second student, a tutor and a super tutor."""
    return {
        'student': make_user('alice'),
        'other_student': make_user('bob'),
        'tutor': make_user('tina', Role.TUTOR),
        'super_tutor': make_user('sam', Role.SUPER_TUTOR),
    }
