"""Add quiz attempt, feedback and stored object tables

Revision ID: 8e5f0b6c4d21
Revises: 3a7c1e9d2b40
Create Date: 2026-09-15 16:40:27.552931

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision = '8e5f0b6c4d21'
down_revision = '3a7c1e9d2b40'
branch_labels = None
depends_on = None


def upgrade():
    inspector = inspect(op.get_bind())
    tables = inspector.get_table_names()

    if 'quiz_attempts' not in tables:
        op.create_table('quiz_attempts',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('category_id', sa.Integer(), nullable=False),
            sa.Column('difficulty_id', sa.Integer(), nullable=False),
            sa.Column('total_questions', sa.Integer(), nullable=False),
            sa.Column('correct_answers', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('score', sa.Numeric(precision=5, scale=2), nullable=True),
            sa.Column('time_taken', sa.Integer(), nullable=True),
            sa.Column('started_at', sa.DateTime(), nullable=False),
            sa.Column('completed_at', sa.DateTime(), nullable=True),
            sa.Column('is_completed', sa.Boolean(), nullable=False, server_default='0'),
            sa.ForeignKeyConstraint(['student_id'], ['users.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
            sa.ForeignKeyConstraint(['difficulty_id'], ['difficulty_levels.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('student_id', 'category_id', 'difficulty_id',
                                name='uq_attempt_student_category_difficulty')
        )
        op.create_index('ix_quiz_attempts_student_id', 'quiz_attempts', ['student_id'], unique=False)
        op.create_index('ix_quiz_attempts_category_id', 'quiz_attempts', ['category_id'], unique=False)
        op.create_index('ix_quiz_attempts_difficulty_id', 'quiz_attempts', ['difficulty_id'], unique=False)
        op.create_index('ix_quiz_attempts_started_at', 'quiz_attempts', ['started_at'], unique=False)
        op.create_index('ix_quiz_attempts_completed_at', 'quiz_attempts', ['completed_at'], unique=False)
        op.create_index('ix_quiz_attempts_is_completed', 'quiz_attempts', ['is_completed'], unique=False)
        op.create_index('ix_quiz_attempts_student_completed', 'quiz_attempts',
                        ['student_id', 'is_completed'], unique=False)

    if 'quiz_attempt_questions' not in tables:
        op.create_table('quiz_attempt_questions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('attempt_id', sa.Integer(), nullable=False),
            sa.Column('question_id', sa.Integer(), nullable=False),
            sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
            sa.ForeignKeyConstraint(['attempt_id'], ['quiz_attempts.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['question_id'], ['questions.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('attempt_id', 'question_id', name='uq_attempt_assigned_question')
        )
        op.create_index('ix_quiz_attempt_questions_attempt_id', 'quiz_attempt_questions',
                        ['attempt_id'], unique=False)

    if 'quiz_answers' not in tables:
        op.create_table('quiz_answers',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('attempt_id', sa.Integer(), nullable=False),
            sa.Column('question_id', sa.Integer(), nullable=False),
            sa.Column('selected_option_id', sa.Integer(), nullable=True),
            sa.Column('is_correct', sa.Boolean(), nullable=False, server_default='0'),
            sa.Column('answered_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['attempt_id'], ['quiz_attempts.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['question_id'], ['questions.id']),
            sa.ForeignKeyConstraint(['selected_option_id'], ['question_options.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('attempt_id', 'question_id', name='uq_attempt_question')
        )
        op.create_index('ix_quiz_answers_attempt_id', 'quiz_answers', ['attempt_id'], unique=False)
        op.create_index('ix_quiz_answers_question_id', 'quiz_answers', ['question_id'], unique=False)

    if 'feedback' not in tables:
        op.create_table('feedback',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('attempt_id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('tutor_id', sa.Integer(), nullable=False),
            sa.Column('feedback_text', sa.Text(), nullable=False),
            sa.Column('recommendations', sa.Text(), nullable=True),
            sa.Column('rating', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_feedback_rating'),
            sa.ForeignKeyConstraint(['attempt_id'], ['quiz_attempts.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['student_id'], ['users.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['tutor_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_feedback_attempt_id', 'feedback', ['attempt_id'], unique=False)
        op.create_index('ix_feedback_student_id', 'feedback', ['student_id'], unique=False)
        op.create_index('ix_feedback_tutor_id', 'feedback', ['tutor_id'], unique=False)
        op.create_index('ix_feedback_created_at', 'feedback', ['created_at'], unique=False)

    if 'student_feedback' not in tables:
        op.create_table('student_feedback',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('attempt_id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('tutor_id', sa.Integer(), nullable=True),
            sa.Column('feedback_text', sa.Text(), nullable=False),
            sa.Column('rating', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)',
                               name='ck_student_feedback_rating'),
            sa.ForeignKeyConstraint(['attempt_id'], ['quiz_attempts.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['student_id'], ['users.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['tutor_id'], ['users.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_student_feedback_attempt_id', 'student_feedback', ['attempt_id'], unique=False)
        op.create_index('ix_student_feedback_student_id', 'student_feedback', ['student_id'], unique=False)
        op.create_index('ix_student_feedback_tutor_id', 'student_feedback', ['tutor_id'], unique=False)

    if 'stored_objects' not in tables:
        op.create_table('stored_objects',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('bucket', sa.String(length=64), nullable=False),
            sa.Column('path', sa.String(length=512), nullable=False),
            sa.Column('owner_id', sa.Integer(), nullable=True),
            sa.Column('content_type', sa.String(length=100), nullable=False),
            sa.Column('size', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('bucket', 'path', name='uq_stored_objects_bucket_path')
        )
        op.create_index('ix_stored_objects_bucket', 'stored_objects', ['bucket'], unique=False)
        op.create_index('ix_stored_objects_owner_id', 'stored_objects', ['owner_id'], unique=False)


def downgrade():
    op.drop_table('stored_objects')
    op.drop_table('student_feedback')
    op.drop_table('feedback')
    op.drop_table('quiz_answers')
    op.drop_table('quiz_attempt_questions')
    op.drop_table('quiz_attempts')
