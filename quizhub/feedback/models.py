"""
Feedback exchanged about completed quiz attempts: tutors write Feedback to
students, students write StudentFeedback to tutors.
"""
from datetime import datetime

from quizhub import db


class Feedback(db.Model):
    __tablename__ = "feedback"

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey("quiz_attempts.id", ondelete='CASCADE'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='CASCADE'), nullable=False, index=True)
    tutor_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='CASCADE'), nullable=False, index=True)
    feedback_text = db.Column(db.Text, nullable=False)
    recommendations = db.Column(db.Text, nullable=True)
    rating = db.Column(db.Integer, nullable=True)  # 1..5
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    attempt = db.relationship("QuizAttempt", backref=db.backref("feedback", lazy="dynamic", cascade="all, delete-orphan"))
    student = db.relationship("User", foreign_keys=[student_id])
    tutor = db.relationship("User", foreign_keys=[tutor_id])

    __table_args__ = (
        db.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_feedback_rating'),
    )

    def __repr__(self) -> str:
        return f"<Feedback {self.id}: attempt {self.attempt_id}>"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'attempt_id': self.attempt_id,
            'student_id': self.student_id,
            'student_name': self.student.full_name if self.student else None,
            'tutor_id': self.tutor_id,
            'tutor_name': self.tutor.full_name if self.tutor else None,
            'feedback_text': self.feedback_text,
            'recommendations': self.recommendations,
            'rating': self.rating,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class StudentFeedback(db.Model):
    __tablename__ = "student_feedback"

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey("quiz_attempts.id", ondelete='CASCADE'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='CASCADE'), nullable=False, index=True)
    tutor_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='SET NULL'), nullable=True, index=True)
    feedback_text = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    attempt = db.relationship("QuizAttempt", backref=db.backref("student_feedback", lazy="dynamic", cascade="all, delete-orphan"))
    student = db.relationship("User", foreign_keys=[student_id])
    tutor = db.relationship("User", foreign_keys=[tutor_id])

    __table_args__ = (
        db.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_student_feedback_rating'),
    )

    def __repr__(self) -> str:
        return f"<StudentFeedback {self.id}: attempt {self.attempt_id}>"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'attempt_id': self.attempt_id,
            'student_id': self.student_id,
            'student_name': self.student.full_name if self.student else None,
            'tutor_id': self.tutor_id,
            'tutor_name': self.tutor.full_name if self.tutor else None,
            'feedback_text': self.feedback_text,
            'rating': self.rating,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
