"""
Database models for quiz attempts.

A student has at most one attempt per category/difficulty pair. The
question set drawn when the attempt starts is stored so a resumed attempt
shows the same questions in the same order.
"""
from datetime import datetime

from quizhub import db


class QuizAttempt(db.Model):
    """
    Model for tracking student quiz attempts.
    """
    __tablename__ = "quiz_attempts"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='CASCADE'), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=False, index=True)
    difficulty_id = db.Column(db.Integer, db.ForeignKey("difficulty_levels.id"), nullable=False, index=True)
    total_questions = db.Column(db.Integer, nullable=False)
    correct_answers = db.Column(db.Integer, nullable=False, default=0)
    score = db.Column(db.Numeric(5, 2), nullable=True)  # Percentage score
    time_taken = db.Column(db.Integer, nullable=True)  # Seconds
    started_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    completed_at = db.Column(db.DateTime, nullable=True, index=True)
    is_completed = db.Column(db.Boolean, default=False, nullable=False, index=True)

    # Relationships
    student = db.relationship("User", foreign_keys=[student_id], backref=db.backref("quiz_attempts", lazy="dynamic"))
    category = db.relationship("Category")
    difficulty = db.relationship("DifficultyLevel")
    assigned_questions = db.relationship(
        "QuizAttemptQuestion",
        backref="attempt",
        cascade="all, delete-orphan",
        order_by="QuizAttemptQuestion.order_index",
    )
    answers = db.relationship(
        "QuizAnswer",
        backref="attempt",
        lazy="dynamic",
        cascade="all, delete-orphan",
        order_by="QuizAnswer.id",
    )

    __table_args__ = (
        db.UniqueConstraint('student_id', 'category_id', 'difficulty_id', name='uq_attempt_student_category_difficulty'),
        db.Index('ix_quiz_attempts_student_completed', 'student_id', 'is_completed'),
    )

    def __repr__(self) -> str:
        return f"<QuizAttempt {self.id}: Student {self.student_id}>"

    def question_ids(self) -> list[int]:
        return [row.question_id for row in self.assigned_questions]

    def apply_result(self, correct: int, time_taken: int | None = None) -> None:
        """Record the outcome and mark the attempt completed."""
        self.correct_answers = correct
        self.score = round(correct / self.total_questions * 100, 2) if self.total_questions else 0
        self.time_taken = time_taken
        self.completed_at = datetime.utcnow()
        self.is_completed = True


class QuizAttemptQuestion(db.Model):
    __tablename__ = "quiz_attempt_questions"

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey("quiz_attempts.id", ondelete='CASCADE'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)

    question = db.relationship("Question")

    __table_args__ = (
        db.UniqueConstraint('attempt_id', 'question_id', name='uq_attempt_assigned_question'),
    )

    def __repr__(self) -> str:
        return f"<QuizAttemptQuestion {self.attempt_id}:{self.question_id}>"


class QuizAnswer(db.Model):
    """
    Model for student answers. is_correct is a snapshot taken on submission
    and is not recomputed if the question is edited later.
    """
    __tablename__ = "quiz_answers"

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey("quiz_attempts.id", ondelete='CASCADE'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=False, index=True)
    selected_option_id = db.Column(db.Integer, db.ForeignKey("question_options.id"), nullable=True)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    answered_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    question = db.relationship("Question")
    selected_option = db.relationship("QuestionOption", foreign_keys=[selected_option_id])

    __table_args__ = (
        db.UniqueConstraint('attempt_id', 'question_id', name='uq_attempt_question'),
    )

    def __repr__(self) -> str:
        return f"<QuizAnswer {self.id}: Question {self.question_id}>"
