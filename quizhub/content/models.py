"""
Database models for quiz content.

Questions belong to one category and one difficulty level and carry an
ordered list of options, exactly one of which is correct. Content rows are
deactivated rather than deleted so past attempts keep their references.
"""
from datetime import datetime

from quizhub import db


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Category {self.id}: {self.name}>"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'is_active': self.is_active,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class DifficultyLevel(db.Model):
    __tablename__ = "difficulty_levels"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=True)
    order_index = db.Column(db.Integer, nullable=False, default=0, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<DifficultyLevel {self.id}: {self.name}>"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'order_index': self.order_index,
            'is_active': self.is_active,
        }


class Question(db.Model):
    __tablename__ = "questions"

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=False, index=True)
    difficulty_id = db.Column(db.Integer, db.ForeignKey("difficulty_levels.id"), nullable=False, index=True)
    question_text = db.Column(db.Text, nullable=False)
    explanation = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.Text, nullable=True)
    audio_url = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    category = db.relationship("Category", backref=db.backref("questions", lazy="dynamic"))
    difficulty = db.relationship("DifficultyLevel", backref=db.backref("questions", lazy="dynamic"))
    creator = db.relationship("User", foreign_keys=[created_by])
    options = db.relationship(
        "QuestionOption",
        backref="question",
        cascade="all, delete-orphan",
        order_by="QuestionOption.order_index",
    )

    __table_args__ = (
        db.Index('ix_questions_category_difficulty_active', 'category_id', 'difficulty_id', 'is_active'),
    )

    def __repr__(self) -> str:
        return f"<Question {self.id}>"

    def to_public_dict(self) -> dict:
        """Question as served to a student: options without correctness."""
        return {
            'id': self.id,
            'question_text': self.question_text,
            'image_url': self.image_url,
            'audio_url': self.audio_url,
            'options': [
                {'id': opt.id, 'option_text': opt.option_text}
                for opt in self.options
            ],
        }

    def to_dict(self) -> dict:
        """Full authoring view including correctness and taxonomy names."""
        return {
            'id': self.id,
            'category_id': self.category_id,
            'difficulty_id': self.difficulty_id,
            'category_name': self.category.name if self.category else None,
            'difficulty_name': self.difficulty.name if self.difficulty else None,
            'question_text': self.question_text,
            'explanation': self.explanation,
            'image_url': self.image_url,
            'audio_url': self.audio_url,
            'is_active': self.is_active,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'options': [opt.to_dict() for opt in self.options],
        }


class QuestionOption(db.Model):
    __tablename__ = "question_options"

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id", ondelete='CASCADE'), nullable=False, index=True)
    option_text = db.Column(db.Text, nullable=False)
    is_correct = db.Column(db.Boolean, default=False, nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.Index('ix_question_options_question_order', 'question_id', 'order_index'),
    )

    def __repr__(self) -> str:
        return f"<QuestionOption {self.id}: {self.option_text[:50]}>"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'option_text': self.option_text,
            'is_correct': self.is_correct,
            'order_index': self.order_index,
        }
