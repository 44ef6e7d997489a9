"""
Quiz attempt lifecycle and reporting.

An attempt is started for a (student, category, difficulty) triple, has its
question set drawn at random from the active bank, and is graded exactly
once on submission.
"""
import random
from collections import OrderedDict

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from quizhub import db
from quizhub.auth.models import Role, User
from quizhub.config import config
from quizhub.common.responses import as_float, iso, parse_int
from quizhub.content.models import Category, DifficultyLevel, Question, QuestionOption
from quizhub.content.service import get_category, get_difficulty_level
from quizhub.errors import AccessDeniedError, AlreadyCompletedError, NotFoundError, ValidationError
from quizhub.quiz.models import QuizAnswer, QuizAttempt, QuizAttemptQuestion

ATTEMPT_NOT_OPEN = "Quiz attempt not found or already completed"


def _find_attempt(student_id: int, category_id: int, difficulty_id: int) -> QuizAttempt | None:
    return QuizAttempt.query.filter_by(
        student_id=student_id,
        category_id=category_id,
        difficulty_id=difficulty_id,
    ).first()


def _attempt_payload(attempt: QuizAttempt, resumed: bool) -> dict:
    return {
        'attempt_id': attempt.id,
        'questions': [row.question.to_public_dict() for row in attempt.assigned_questions],
        'total_questions': attempt.total_questions,
        'resumed': resumed,
    }


def _resume(attempt: QuizAttempt) -> dict:
    if attempt.is_completed:
        raise AlreadyCompletedError("You have already completed this quiz")
    return _attempt_payload(attempt, resumed=True)


def start_quiz_attempt(caller, student_id, category_id, difficulty_id, question_count=None) -> dict:
    """
    Start an attempt, or resume the open one for the same triple.

    Returns {attempt_id, questions, total_questions, resumed}. Questions are
    served without option correctness.
    """
    student_id = caller.id if student_id in (None, '') else parse_int(student_id, 'student_id')
    if student_id != caller.id:
        raise AccessDeniedError()

    category_id = parse_int(category_id, 'category_id')
    difficulty_id = parse_int(difficulty_id, 'difficulty_id')
    if question_count in (None, ''):
        question_count = config.DEFAULT_QUESTION_COUNT
    question_count = parse_int(question_count, 'question_count', minimum=1,
                               maximum=config.MAX_QUESTION_COUNT)

    # A finished quiz stays finished even if its category was retired since
    existing = _find_attempt(student_id, category_id, difficulty_id)
    if existing is not None:
        return _resume(existing)

    get_category(category_id, active_only=True)
    get_difficulty_level(difficulty_id, active_only=True)

    pool = [
        question_id for (question_id,) in db.session.query(Question.id).filter(
            Question.category_id == category_id,
            Question.difficulty_id == difficulty_id,
            Question.is_active.is_(True),
        ).all()
    ]
    if not pool:
        raise ValidationError("No questions available for this quiz")

    chosen = random.sample(pool, min(question_count, len(pool)))
    attempt = QuizAttempt(
        student_id=student_id,
        category_id=category_id,
        difficulty_id=difficulty_id,
        total_questions=len(chosen),
    )
    attempt.assigned_questions = [
        QuizAttemptQuestion(question_id=question_id, order_index=index)
        for index, question_id in enumerate(chosen)
    ]
    db.session.add(attempt)
    try:
        db.session.commit()
    except IntegrityError:
        # Another request created the attempt for this triple first
        db.session.rollback()
        existing = _find_attempt(student_id, category_id, difficulty_id)
        if existing is None:
            raise
        current_app.logger.info(f"Concurrent start resolved to attempt {existing.id}")
        return _resume(existing)

    current_app.logger.info(
        f"Quiz attempt {attempt.id} started: student={student_id} "
        f"category={category_id} difficulty={difficulty_id} questions={len(chosen)}"
    )
    return _attempt_payload(attempt, resumed=False)


def _parse_answers(answers, assigned: set[int]) -> list[tuple[int, int]]:
    if not isinstance(answers, list):
        raise ValidationError("answers must be a list")

    parsed = []
    seen = set()
    for index, entry in enumerate(answers):
        if not isinstance(entry, dict):
            raise ValidationError(f"answers[{index}] must be an object")
        question_id = parse_int(entry.get('question_id'), f"answers[{index}].question_id")
        option_id = parse_int(entry.get('selected_option_id'), f"answers[{index}].selected_option_id")
        if question_id not in assigned:
            raise ValidationError(f"Question {question_id} is not part of this attempt")
        if question_id in seen:
            raise ValidationError(f"Question {question_id} was answered more than once")
        seen.add(question_id)
        parsed.append((question_id, option_id))
    return parsed


def submit_quiz_answers(caller, attempt_id, answers, time_taken=None) -> dict:
    """
    Grade a batch of answers and complete the attempt.

    The whole batch is validated before anything is written; questions left
    out of the batch count as incorrect.
    """
    attempt = db.session.get(QuizAttempt, attempt_id)
    if attempt is None or attempt.is_completed or attempt.student_id != caller.id:
        raise NotFoundError(ATTEMPT_NOT_OPEN)

    time_taken = parse_int(time_taken, 'time_taken', required=False, minimum=0)
    parsed = _parse_answers(answers, set(attempt.question_ids()))

    option_ids = {option_id for _, option_id in parsed}
    options = {
        option.id: option
        for option in QuestionOption.query.filter(QuestionOption.id.in_(option_ids)).all()
    } if option_ids else {}

    correct = 0
    rows = []
    for question_id, option_id in parsed:
        option = options.get(option_id)
        if option is None or option.question_id != question_id:
            raise ValidationError(f"Option {option_id} does not belong to question {question_id}")
        if option.is_correct:
            correct += 1
        rows.append(QuizAnswer(
            attempt_id=attempt.id,
            question_id=question_id,
            selected_option_id=option_id,
            is_correct=option.is_correct,
        ))

    db.session.add_all(rows)
    attempt.apply_result(correct, time_taken)
    try:
        db.session.commit()
    except IntegrityError:
        # A parallel submission completed the attempt first
        db.session.rollback()
        raise NotFoundError(ATTEMPT_NOT_OPEN)

    current_app.logger.info(
        f"Quiz attempt {attempt.id} submitted: {correct}/{attempt.total_questions} correct"
    )
    return {
        'attempt_id': attempt.id,
        'correct_answers': attempt.correct_answers,
        'total_questions': attempt.total_questions,
        'score': as_float(attempt.score),
    }


def get_quiz_results(caller, attempt_id) -> dict:
    attempt = db.session.get(QuizAttempt, attempt_id)
    if attempt is None or not caller.can_read_student(attempt.student_id):
        raise NotFoundError("Quiz attempt not found")

    answers = []
    for answer in attempt.answers:
        question = answer.question
        answers.append({
            'question_id': question.id,
            'question_text': question.question_text,
            'explanation': question.explanation,
            'image_url': question.image_url,
            'audio_url': question.audio_url,
            'selected_option_id': answer.selected_option_id,
            'is_correct': answer.is_correct,
            'options': [
                {
                    'id': option.id,
                    'option_text': option.option_text,
                    'is_correct': option.is_correct,
                    'is_selected': option.id == answer.selected_option_id,
                }
                for option in question.options
            ],
        })

    return {
        'attempt': {
            'id': attempt.id,
            'student_id': attempt.student_id,
            'score': as_float(attempt.score, None),
            'correct_answers': attempt.correct_answers,
            'total_questions': attempt.total_questions,
            'time_taken': attempt.time_taken,
            'started_at': iso(attempt.started_at),
            'completed_at': iso(attempt.completed_at),
            'is_completed': attempt.is_completed,
            'category_id': attempt.category_id,
            'difficulty_id': attempt.difficulty_id,
            'category_name': attempt.category.name,
            'difficulty_name': attempt.difficulty.name,
        },
        'answers': answers,
    }


def _summary(attempt: QuizAttempt, include_student: bool = False) -> dict:
    data = {
        'id': attempt.id,
        'category_id': attempt.category_id,
        'difficulty_id': attempt.difficulty_id,
        'category_name': attempt.category.name,
        'difficulty_name': attempt.difficulty.name,
        'score': as_float(attempt.score),
        'correct_answers': attempt.correct_answers,
        'total_questions': attempt.total_questions,
        'time_taken': attempt.time_taken,
        'completed_at': iso(attempt.completed_at),
    }
    if include_student:
        data['student_id'] = attempt.student_id
        data['student_name'] = attempt.student.full_name if attempt.student else None
    return data


def _average(scores: list[float]) -> float:
    return round(sum(scores) / len(scores), 2) if scores else 0


def _completed_attempts(student_id: int | None = None):
    query = QuizAttempt.query.filter(QuizAttempt.is_completed.is_(True))
    if student_id is not None:
        query = query.filter(QuizAttempt.student_id == student_id)
    return query.order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc())


def _category_stats(attempts: list[QuizAttempt], with_best: bool) -> dict:
    grouped = OrderedDict()
    for attempt in attempts:
        grouped.setdefault(attempt.category.name, []).append(as_float(attempt.score))

    stats = {}
    for name, scores in grouped.items():
        entry = {'attempts': len(scores), 'averageScore': _average(scores)}
        if with_best:
            entry['bestScore'] = max(scores)
        stats[name] = entry
    return stats


def get_student_progress(caller, student_id) -> dict:
    """
    Aggregate a student's completed attempts.

    Returns totalAttempts, averageScore, bestScore, categoryStats keyed by
    category name, and the most recent attempts.
    """
    student_id = parse_int(student_id, 'student_id')
    caller.require_student_access(student_id)

    attempts = _completed_attempts(student_id).all()
    scores = [as_float(a.score) for a in attempts]
    return {
        'totalAttempts': len(attempts),
        'averageScore': _average(scores),
        'bestScore': max(scores) if scores else 0,
        'categoryStats': _category_stats(attempts, with_best=True),
        'recentAttempts': [_summary(a) for a in attempts[:config.RECENT_ATTEMPTS_LIMIT]],
    }


def get_available_quizzes() -> list[dict]:
    """
    Active category/difficulty pairs that have at least one active question.
    """
    counts = db.session.query(
        Question.category_id, Question.difficulty_id, func.count(Question.id)
    ).join(Category, Category.id == Question.category_id) \
        .join(DifficultyLevel, DifficultyLevel.id == Question.difficulty_id) \
        .filter(
            Question.is_active.is_(True),
            Category.is_active.is_(True),
            DifficultyLevel.is_active.is_(True),
        ).group_by(Question.category_id, Question.difficulty_id).all()

    if not counts:
        return []

    by_pair = {(category_id, difficulty_id): count for category_id, difficulty_id, count in counts}
    category_ids = {category_id for category_id, _ in by_pair}
    difficulty_ids = {difficulty_id for _, difficulty_id in by_pair}

    categories = Category.query.filter(Category.id.in_(category_ids)).order_by(Category.name).all()
    levels = DifficultyLevel.query.filter(DifficultyLevel.id.in_(difficulty_ids)) \
        .order_by(DifficultyLevel.order_index, DifficultyLevel.id).all()

    available = []
    for category in categories:
        difficulties = [
            {
                'id': level.id,
                'name': level.name,
                'description': level.description,
                'question_count': by_pair[(category.id, level.id)],
            }
            for level in levels if (category.id, level.id) in by_pair
        ]
        available.append({
            'id': category.id,
            'name': category.name,
            'description': category.description,
            'difficulties': difficulties,
        })
    return available


def list_quiz_results(caller, student_id=None, category_id=None, limit=None) -> list[dict]:
    """Completed attempts, newest first. Students only ever see their own."""
    student_id = parse_int(student_id, 'student_id', required=False)
    if not caller.is_tutor_or_admin:
        if student_id is not None and student_id != caller.id:
            raise AccessDeniedError()
        student_id = caller.id

    query = _completed_attempts(student_id)
    category_id = parse_int(category_id, 'category_id', required=False)
    if category_id is not None:
        query = query.filter(QuizAttempt.category_id == category_id)
    limit = parse_int(limit, 'limit', required=False, minimum=1, maximum=500)
    if limit:
        query = query.limit(limit)

    return [_summary(a, include_student=True) for a in query.all()]


def get_tutor_analytics(caller) -> dict:
    caller.require_tutor()

    attempts = _completed_attempts().all()
    scores = [as_float(a.score) for a in attempts]
    student_count = db.session.query(func.count(User.id)).filter(
        User.role == Role.STUDENT, User.is_active.is_(True)
    ).scalar()
    return {
        'totalAttempts': len(attempts),
        'totalStudents': student_count or 0,
        'averageScore': _average(scores),
        'categoryStats': _category_stats(attempts, with_best=False),
        'recentAttempts': [
            _summary(a, include_student=True) for a in attempts[:config.RECENT_ATTEMPTS_LIMIT]
        ],
    }
