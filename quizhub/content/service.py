"""
Question authoring: categories, difficulty levels, questions and options.

Reads are open to every authenticated caller and return active rows only.
Writes require a tutor; difficulty levels require a super tutor.
"""
import math

from flask import current_app
from sqlalchemy.exc import IntegrityError

from quizhub import db
from quizhub.config import config
from quizhub.common.responses import parse_int
from quizhub.content.models import Category, DifficultyLevel, Question, QuestionOption
from quizhub.errors import ConflictError, NotFoundError, ValidationError


def _clean_text(value, field: str, required: bool = False, max_length: int | None = None) -> str | None:
    if value is None:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    value = value.strip()
    if required and not value:
        raise ValidationError(f"{field} is required")
    if max_length and len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value or None


def _commit_unique(message: str) -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(message)


# --- Categories -----------------------------------------------------------

def list_categories(include_inactive: bool = False) -> list[dict]:
    query = Category.query
    if not include_inactive:
        query = query.filter_by(is_active=True)
    return [c.to_dict() for c in query.order_by(Category.name).all()]


def get_category(category_id: int, active_only: bool = False) -> Category:
    category = db.session.get(Category, category_id)
    if category is None or (active_only and not category.is_active):
        raise NotFoundError("Category not found")
    return category


def create_category(caller, data: dict) -> dict:
    caller.require_tutor()
    name = _clean_text(data.get('name'), 'Category name', required=True, max_length=100)
    category = Category(
        name=name,
        description=_clean_text(data.get('description'), 'Description'),
        created_by=caller.id,
    )
    db.session.add(category)
    _commit_unique(f"Category {name} already exists")
    current_app.logger.info(f"Category created: id={category.id} by user {caller.id}")
    return category.to_dict()


def update_category(caller, category_id: int, data: dict) -> dict:
    caller.require_tutor()
    category = get_category(category_id)
    if 'name' in data:
        category.name = _clean_text(data.get('name'), 'Category name', required=True, max_length=100)
    if 'description' in data:
        category.description = _clean_text(data.get('description'), 'Description')
    if 'is_active' in data:
        category.is_active = bool(data.get('is_active'))
    _commit_unique(f"Category {category.name} already exists")
    return category.to_dict()


def delete_category(caller, category_id: int) -> None:
    caller.require_tutor()
    category = get_category(category_id)
    category.is_active = False
    db.session.commit()
    current_app.logger.info(f"Category deactivated: id={category_id} by user {caller.id}")


# --- Difficulty levels ----------------------------------------------------

def list_difficulty_levels(include_inactive: bool = False) -> list[dict]:
    query = DifficultyLevel.query
    if not include_inactive:
        query = query.filter_by(is_active=True)
    return [d.to_dict() for d in query.order_by(DifficultyLevel.order_index, DifficultyLevel.id).all()]


def get_difficulty_level(difficulty_id: int, active_only: bool = False) -> DifficultyLevel:
    level = db.session.get(DifficultyLevel, difficulty_id)
    if level is None or (active_only and not level.is_active):
        raise NotFoundError("Difficulty level not found")
    return level


def create_difficulty_level(caller, data: dict) -> dict:
    caller.require_super_tutor()
    name = _clean_text(data.get('name'), 'Difficulty name', required=True, max_length=50)
    level = DifficultyLevel(
        name=name,
        description=_clean_text(data.get('description'), 'Description'),
        order_index=parse_int(data.get('order_index'), 'order_index', required=False) or 0,
    )
    db.session.add(level)
    _commit_unique(f"Difficulty level {name} already exists")
    return level.to_dict()


def update_difficulty_level(caller, difficulty_id: int, data: dict) -> dict:
    caller.require_super_tutor()
    level = get_difficulty_level(difficulty_id)
    if 'name' in data:
        level.name = _clean_text(data.get('name'), 'Difficulty name', required=True, max_length=50)
    if 'description' in data:
        level.description = _clean_text(data.get('description'), 'Description')
    if 'order_index' in data:
        level.order_index = parse_int(data.get('order_index'), 'order_index')
    if 'is_active' in data:
        level.is_active = bool(data.get('is_active'))
    _commit_unique(f"Difficulty level {level.name} already exists")
    return level.to_dict()


def delete_difficulty_level(caller, difficulty_id: int) -> None:
    caller.require_super_tutor()
    level = get_difficulty_level(difficulty_id)
    level.is_active = False
    db.session.commit()


# --- Questions ------------------------------------------------------------

def _validate_options(raw_options) -> list[dict]:
    """
    Normalize an option list and enforce the single-correct-answer rule.
    """
    if not isinstance(raw_options, list) or len(raw_options) < 2:
        raise ValidationError("A question needs at least two options")

    options = []
    seen_ids = set()
    for index, raw in enumerate(raw_options):
        if not isinstance(raw, dict):
            raise ValidationError(f"Option {index + 1} must be an object")
        option_id = parse_int(raw.get('id'), 'Option id', required=False)
        if option_id is not None:
            if option_id in seen_ids:
                raise ValidationError(f"Option {option_id} is listed more than once")
            seen_ids.add(option_id)
        options.append({
            'id': option_id,
            'option_text': _clean_text(raw.get('option_text'), f"Option {index + 1} text", required=True),
            'is_correct': raw.get('is_correct') is True,
            'order_index': index,
        })

    correct = sum(1 for opt in options if opt['is_correct'])
    if correct != 1:
        raise ValidationError("Exactly one option must be marked correct")
    return options


def _question_fields(data: dict, partial: bool = False) -> dict:
    fields = {}
    if not partial or 'category_id' in data:
        category_id = parse_int(data.get('category_id'), 'category_id')
        fields['category_id'] = get_category(category_id, active_only=True).id
    if not partial or 'difficulty_id' in data:
        difficulty_id = parse_int(data.get('difficulty_id'), 'difficulty_id')
        fields['difficulty_id'] = get_difficulty_level(difficulty_id, active_only=True).id
    if not partial or 'question_text' in data:
        fields['question_text'] = _clean_text(data.get('question_text'), 'Question text', required=True)
    for key in ('explanation', 'image_url', 'audio_url'):
        if not partial or key in data:
            fields[key] = _clean_text(data.get(key), key)
    return fields


def get_question(question_id: int, active_only: bool = True) -> Question:
    question = db.session.get(Question, question_id)
    if question is None or (active_only and not question.is_active):
        raise NotFoundError("Question not found")
    return question


def list_questions(category_id=None, difficulty_id=None, search=None, page=1, limit=None) -> dict:
    """Paginated active questions with their options."""
    page = parse_int(page, 'page', required=False, minimum=1) or 1
    limit = parse_int(limit, 'limit', required=False, minimum=1, maximum=100) or config.QUESTIONS_PAGE_SIZE

    query = Question.query.filter(Question.is_active.is_(True))
    if category_id not in (None, ''):
        query = query.filter(Question.category_id == parse_int(category_id, 'category_id'))
    if difficulty_id not in (None, ''):
        query = query.filter(Question.difficulty_id == parse_int(difficulty_id, 'difficulty_id'))
    if search:
        query = query.filter(Question.question_text.ilike(f"%{search.strip()}%"))

    total = query.count()
    questions = query.order_by(Question.created_at.desc(), Question.id.desc()) \
        .offset((page - 1) * limit).limit(limit).all()
    total_pages = math.ceil(total / limit) if total else 0

    return {
        'questions': [q.to_dict() for q in questions],
        'pagination': {
            'currentPage': page,
            'totalPages': total_pages,
            'totalCount': total,
            'hasNext': page < total_pages,
            'hasPrev': page > 1,
        },
    }


def create_question(caller, data: dict) -> dict:
    caller.require_tutor()
    fields = _question_fields(data)
    options = _validate_options(data.get('options'))

    question = Question(created_by=caller.id, **fields)
    for opt in options:
        question.options.append(QuestionOption(
            option_text=opt['option_text'],
            is_correct=opt['is_correct'],
            order_index=opt['order_index'],
        ))
    db.session.add(question)
    db.session.commit()
    current_app.logger.info(f"Question created: id={question.id} by user {caller.id}")
    return question.to_dict()


def update_question(caller, question_id: int, data: dict) -> dict:
    """
    Update question fields and, when given, replace its option set.

    Options carrying an existing id are edited in place; an option that
    already has recorded answers cannot be removed.
    """
    from quizhub.quiz.models import QuizAnswer

    caller.require_tutor()
    question = get_question(question_id, active_only=False)
    for key, value in _question_fields(data, partial=True).items():
        setattr(question, key, value)

    if 'options' in data:
        options = _validate_options(data.get('options'))
        existing = {opt.id: opt for opt in question.options}
        keep_ids = {opt['id'] for opt in options if opt['id'] is not None}

        unknown = keep_ids - set(existing)
        if unknown:
            raise ValidationError(f"Option {min(unknown)} does not belong to this question")

        removed = set(existing) - keep_ids
        if removed:
            answered = db.session.query(QuizAnswer.selected_option_id).filter(
                QuizAnswer.selected_option_id.in_(removed)
            ).first()
            if answered:
                raise ValidationError(
                    f"Option {answered[0]} has recorded answers and cannot be removed"
                )

        new_options = []
        for opt in options:
            option = existing.get(opt['id']) if opt['id'] is not None else None
            if option is None:
                option = QuestionOption()
            option.option_text = opt['option_text']
            option.is_correct = opt['is_correct']
            option.order_index = opt['order_index']
            new_options.append(option)
        question.options = new_options

    db.session.commit()
    return question.to_dict()


def delete_question(caller, question_id: int) -> None:
    caller.require_tutor()
    question = get_question(question_id, active_only=False)
    question.is_active = False
    db.session.commit()
    current_app.logger.info(f"Question deactivated: id={question_id} by user {caller.id}")
