"""
Flask CLI commands for setting up a QuizHub instance.

    flask --app quizhub:create_app seed-demo
    flask --app quizhub:create_app create-super-tutor --email admin@example.com --username admin
"""
import click
from flask import Flask

from quizhub import db

DEMO_LEVELS = [
    ('Beginner', 'Basic level questions for beginners', 1),
    ('Intermediate', 'Intermediate level questions', 2),
    ('Advanced', 'Advanced level questions for experienced learners', 3),
]

DEMO_CATEGORIES = [
    ('Grammar', 'English grammar questions covering tenses, parts of speech, and sentence structure'),
    ('Vocabulary', 'Word meanings, synonyms, antonyms, and usage'),
    ('Reading Comprehension', 'Understanding and analyzing written texts'),
    ('Listening', 'Audio-based questions for listening skills'),
    ('Writing', 'Writing skills and composition questions'),
    ('Speaking', 'Pronunciation and speaking-related questions'),
]

# (category, level, question, explanation, options, index of correct option)
DEMO_QUESTIONS = [
    ('Grammar', 'Beginner', 'What is the correct form of the verb "to be" for the pronoun "I"?',
     'The correct form of "to be" for "I" is "am".', ['am', 'is', 'are', 'be'], 0),
    ('Grammar', 'Beginner', 'Which of the following is a noun?',
     'A noun names a person, place, thing, or idea. "Book" is a thing.',
     ['quickly', 'book', 'run', 'beautiful'], 1),
    ('Grammar', 'Beginner', 'What is the past tense of "go"?',
     'The past tense of "go" is "went". This is an irregular verb form.',
     ['goed', 'went', 'gone', 'going'], 1),
    ('Grammar', 'Beginner', 'Which sentence is grammatically correct?',
     'Singular subjects take singular verbs.',
     ['The dogs runs fast', 'The dog run fast', 'The dog runs fast', 'The dogs run fast'], 2),
    ('Grammar', 'Beginner', 'What type of word is "quickly"?',
     'Words ending in "-ly" are typically adverbs.', ['noun', 'verb', 'adjective', 'adverb'], 3),
    ('Grammar', 'Intermediate', 'What is the correct passive voice form of "The teacher explains the lesson"?',
     'In passive voice the object becomes the subject, with "be" + past participle.',
     ['The lesson is explained by the teacher', 'The lesson explains by the teacher',
      'The lesson was explaining by the teacher', 'The teacher is explained the lesson'], 0),
    ('Vocabulary', 'Beginner', 'What does "happy" mean?',
     '"Happy" means feeling joy or pleasure.', ['sad', 'angry', 'joyful', 'tired'], 2),
    ('Vocabulary', 'Beginner', 'Which word is the opposite of "big"?',
     '"Small" is the antonym of "big".', ['large', 'huge', 'small', 'tall'], 2),
    ('Vocabulary', 'Beginner', 'What is a synonym for "fast"?',
     '"Quick" means the same as "fast".', ['slow', 'quick', 'lazy', 'tired'], 1),
    ('Vocabulary', 'Beginner', 'What do you call the meal you eat in the morning?',
     'Breakfast is the first meal of the day.', ['lunch', 'dinner', 'breakfast', 'snack'], 2),
    ('Reading Comprehension', 'Beginner', 'Read: "The cat sat on the mat." Where did the cat sit?',
     'The text states that the cat sat "on the mat".',
     ['on the chair', 'on the mat', 'on the bed', 'on the floor'], 1),
]

DEMO_USERS = [
    ('admin', 'admin@demo.com', 'Admin', 'User', 'super_tutor'),
    ('sarah_tutor', 'sarah@demo.com', 'Sarah', 'Johnson', 'tutor'),
    ('john_student', 'john@demo.com', 'John', 'Smith', 'student'),
    ('mary_student', 'mary@demo.com', 'Mary', 'Wilson', 'student'),
    ('alex_student', 'alex@demo.com', 'Alex', 'Brown', 'student'),
]


def seed_demo_data(password: str) -> dict:
    """
    Insert the sample catalogue and demo accounts. Rows that already exist
    (matched by name, question text or email) are left untouched.
    """
    from quizhub.auth.models import Role, User
    from quizhub.auth.utils import hash_password
    from quizhub.content.models import Category, DifficultyLevel, Question, QuestionOption

    created = {'difficulty_levels': 0, 'categories': 0, 'questions': 0, 'users': 0}

    levels = {}
    for name, description, order_index in DEMO_LEVELS:
        level = DifficultyLevel.query.filter_by(name=name).first()
        if level is None:
            level = DifficultyLevel(name=name, description=description, order_index=order_index)
            db.session.add(level)
            created['difficulty_levels'] += 1
        levels[name] = level

    categories = {}
    for name, description in DEMO_CATEGORIES:
        category = Category.query.filter_by(name=name).first()
        if category is None:
            category = Category(name=name, description=description)
            db.session.add(category)
            created['categories'] += 1
        categories[name] = category
    db.session.flush()

    for category_name, level_name, text, explanation, options, correct in DEMO_QUESTIONS:
        if Question.query.filter_by(question_text=text).first():
            continue
        question = Question(
            category_id=categories[category_name].id,
            difficulty_id=levels[level_name].id,
            question_text=text,
            explanation=explanation,
        )
        question.options = [
            QuestionOption(option_text=option, is_correct=index == correct, order_index=index)
            for index, option in enumerate(options)
        ]
        db.session.add(question)
        created['questions'] += 1

    password_hash = hash_password(password)
    for username, email, first_name, last_name, role in DEMO_USERS:
        if User.query.filter_by(email=email).first():
            continue
        db.session.add(User(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=Role(role),
            password_hash=password_hash,
        ))
        created['users'] += 1

    db.session.commit()
    return created


def register_commands(app: Flask) -> None:
    @app.cli.command('seed-demo')
    @click.option('--password', default='DemoPass!2024', show_default=True,
                  help='Password given to every demo account.')
    def seed_demo(password):
        """Load sample categories, questions and demo users."""
        created = seed_demo_data(password)
        for table, count in created.items():
            click.echo(f"{table}: {count} created")

    @app.cli.command('create-super-tutor')
    @click.option('--email', required=True)
    @click.option('--username', required=True)
    @click.option('--first-name', default='Admin')
    @click.option('--last-name', default='User')
    @click.password_option()
    def create_super_tutor(email, username, first_name, last_name, password):
        """Create a super tutor account, subject to the password rules."""
        from quizhub.auth.models import Role
        from quizhub.auth.service import create_user
        from quizhub.errors import QuizHubError

        try:
            user = create_user(
                email=email,
                password=password,
                username=username,
                first_name=first_name,
                last_name=last_name,
                role=Role.SUPER_TUTOR,
                caller=_SystemCaller(),
            )
        except QuizHubError as e:
            raise click.ClickException(e.message)
        click.echo(f"Created super tutor {user.username} (id={user.id})")


class _SystemCaller:
    """Stands in for a super tutor when accounts are created from the CLI."""
    id = None
    is_super_tutor = True
