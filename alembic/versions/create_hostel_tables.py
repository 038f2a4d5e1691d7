"""create hostel tables

Revision ID: 3c1f9a7d2b10
Revises:
Create Date: 2026-10-19 10:12:41

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=10), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('student', 'admin', 'staff', name='user_role'), nullable=False),
        sa.Column('status', sa.Enum('active', 'inactive', name='user_status'), nullable=False),
        sa.Column('token_version', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_phone', 'users', ['phone'], unique=True)

    op.create_table(
        'rooms',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('room_number', sa.String(length=20), nullable=False),
        sa.Column('block', sa.String(length=20), nullable=False),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('occupancy', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('yearly_rent', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('block', 'room_number', name='uq_rooms_block_room_number'),
        sa.CheckConstraint('capacity >= 1', name='ck_rooms_capacity_positive'),
        sa.CheckConstraint('occupancy >= 0 AND occupancy <= capacity', name='ck_rooms_occupancy_range'),
    )
    op.create_index('ix_rooms_block', 'rooms', ['block'])

    op.create_table(
        'students',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('room_id', sa.Uuid(), nullable=False),
        sa.Column('sid', sa.String(length=8), nullable=False),
        sa.Column('permanent_address', sa.String(length=255), nullable=False),
        sa.Column('guardian_name', sa.String(length=100), nullable=True),
        sa.Column('guardian_contact', sa.String(length=10), nullable=False),
        sa.Column('branch', sa.String(length=100), nullable=False),
        sa.Column('leaving_date', sa.Date(), nullable=True),
        sa.Column('block', sa.String(length=20), nullable=False),
        sa.Column('room_number', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_students_user_id', 'students', ['user_id'], unique=True)
    op.create_index('ix_students_room_id', 'students', ['room_id'])
    op.create_index('ix_students_sid', 'students', ['sid'], unique=True)
    op.create_index('ix_students_block', 'students', ['block'])
    op.create_index('ix_students_room_number', 'students', ['room_number'])
    op.create_index('ix_students_branch_created_at', 'students', ['branch', 'created_at'])

    op.create_table(
        'student_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('updated_by', sa.Uuid(), nullable=False),
        sa.Column('old_data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['updated_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_student_history_student_id', 'student_history', ['student_id'])

    op.create_table(
        'leave_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('from_date', sa.Date(), nullable=False),
        sa.Column('to_date', sa.Date(), nullable=False),
        sa.Column('destination', sa.String(length=255), nullable=False),
        sa.Column('reason', sa.String(length=500), nullable=False),
        sa.Column('status', sa.Enum('pending', 'approved', 'rejected', name='leave_status'), nullable=False),
        sa.Column('approved_by', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leave_requests_student_id', 'leave_requests', ['student_id'])

    op.create_table(
        'disciplinary_cases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('reason', sa.String(length=500), nullable=False),
        sa.Column('fine_amount', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('open', 'closed', name='case_status'), nullable=False),
        sa.Column('decided_by', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['decided_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_disciplinary_cases_student_id', 'disciplinary_cases', ['student_id'])

    op.create_table(
        'issues',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column(
            'category',
            sa.Enum('drinking-water', 'plumbing', 'furniture', 'electricity', 'other', name='issue_category'),
            nullable=False,
        ),
        sa.Column('status', sa.Enum('pending', 'resolved', name='issue_status'), nullable=False),
        sa.Column('raised_by', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['raised_by'], ['students.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_issues_raised_by', 'issues', ['raised_by'])

    op.create_table(
        'issue_comments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('issue_id', sa.Uuid(), nullable=False),
        sa.Column('commented_by', sa.Uuid(), nullable=False),
        sa.Column('comment_text', sa.String(length=500), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['issue_id'], ['issues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['commented_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_issue_comments_issue_id', 'issue_comments', ['issue_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('success', 'failed', name='payment_status'), nullable=False),
        sa.Column('transaction_id', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payments_user_id', 'payments', ['user_id'])

    op.create_table(
        'announcements',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('notice_url', sa.String(length=500), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_announcements_category', 'announcements', ['category'])


def downgrade() -> None:
    op.drop_table('announcements')
    op.drop_table('payments')
    op.drop_table('issue_comments')
    op.drop_table('issues')
    op.drop_table('disciplinary_cases')
    op.drop_table('leave_requests')
    op.drop_table('student_history')
    op.drop_table('students')
    op.drop_table('rooms')
    op.drop_table('users')

    # PostgreSQL ENUM 타입은 테이블과 별도로 남으므로 직접 삭제
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name in (
            'payment_status', 'issue_status', 'issue_category',
            'case_status', 'leave_status', 'user_status', 'user_role',
        ):
            op.execute(f'DROP TYPE IF EXISTS {name}')
