"""initial_schema

Revision ID: 20260101_0000
Revises:
Create Date: 2026-01-01 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa

from smartmatch.database_types import GUID, JSON


revision = '20260101_0000'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column(
            'role',
            sa.Enum('CANDIDATE', 'HR', 'UNIVERSITY', 'ADMIN', 'MODERATOR', name='user_role'),
            nullable=False,
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('last_login_ip', sa.String(length=45), nullable=True),
        sa.Column('failed_login_attempts', sa.Integer(), nullable=False),
        sa.Column('account_locked_until', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_is_active'), 'users', ['is_active'], unique=False)

    # Role profiles
    op.create_table(
        'hr_profiles',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('company', sa.String(length=255), nullable=False),
        sa.Column('position', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_hr_profiles_user_id'), 'hr_profiles', ['user_id'], unique=True)
    op.create_index(op.f('ix_hr_profiles_company'), 'hr_profiles', ['company'], unique=False)

    op.create_table(
        'candidate_profiles',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_candidate_profiles_user_id'), 'candidate_profiles', ['user_id'], unique=True)

    op.create_table(
        'university_profiles',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_university_profiles_user_id'), 'university_profiles', ['user_id'], unique=True)

    op.create_table(
        'admin_profiles',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('position', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('permissions', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admin_profiles_user_id'), 'admin_profiles', ['user_id'], unique=True)

    op.create_table(
        'skills',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_skills_name'), 'skills', ['name'], unique=True)
    op.create_index(op.f('ix_skills_category'), 'skills', ['category'], unique=False)

    # Jobs and applications
    op.create_table(
        'jobs',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('hr_id', GUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('responsibilities', sa.Text(), nullable=True),
        sa.Column('benefits', sa.Text(), nullable=True),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('currency', sa.String(length=10), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('experience_level', sa.String(length=20), nullable=False),
        sa.Column('remote', sa.Boolean(), nullable=False),
        sa.Column('deadline', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('moderation_status', sa.String(length=20), nullable=False),
        sa.Column('moderated_at', sa.DateTime(), nullable=True),
        sa.Column('moderator_id', GUID(), nullable=True),
        sa.Column('moderation_notes', sa.Text(), nullable=True),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('applications_count', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['hr_id'], ['hr_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['moderator_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_jobs_hr_id'), 'jobs', ['hr_id'], unique=False)
    op.create_index(op.f('ix_jobs_type'), 'jobs', ['type'], unique=False)
    op.create_index(op.f('ix_jobs_status'), 'jobs', ['status'], unique=False)
    op.create_index(op.f('ix_jobs_moderation_status'), 'jobs', ['moderation_status'], unique=False)

    op.create_table(
        'job_skills',
        sa.Column('job_id', GUID(), nullable=False),
        sa.Column('skill_id', GUID(), nullable=False),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['skill_id'], ['skills.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('job_id', 'skill_id'),
    )

    op.create_table(
        'applications',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('job_id', GUID(), nullable=False),
        sa.Column('candidate_id', GUID(), nullable=False),
        sa.Column('hr_id', GUID(), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('resume_url', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidate_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['hr_id'], ['hr_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id', 'candidate_id', name='uq_application_job_candidate'),
    )
    op.create_index(op.f('ix_applications_job_id'), 'applications', ['job_id'], unique=False)
    op.create_index(op.f('ix_applications_candidate_id'), 'applications', ['candidate_id'], unique=False)
    op.create_index(op.f('ix_applications_hr_id'), 'applications', ['hr_id'], unique=False)
    op.create_index(op.f('ix_applications_status'), 'applications', ['status'], unique=False)

    op.create_table(
        'moderation_logs',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('job_id', GUID(), nullable=False),
        sa.Column('moderator_id', GUID(), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['moderator_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_moderation_logs_job_id'), 'moderation_logs', ['job_id'], unique=False)
    op.create_index(op.f('ix_moderation_logs_moderator_id'), 'moderation_logs', ['moderator_id'], unique=False)
    op.create_index(op.f('ix_moderation_logs_created_at'), 'moderation_logs', ['created_at'], unique=False)

    # Internships
    op.create_table(
        'internships',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('hr_id', GUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('responsibilities', sa.Text(), nullable=True),
        sa.Column('benefits', sa.Text(), nullable=True),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('currency', sa.String(length=10), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('is_remote', sa.Boolean(), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('max_participants', sa.Integer(), nullable=False),
        sa.Column('deadline', sa.DateTime(), nullable=True),
        sa.Column('skills', JSON(), nullable=False),
        sa.Column('tags', JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('applications_count', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['hr_id'], ['hr_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_internships_hr_id'), 'internships', ['hr_id'], unique=False)
    op.create_index(op.f('ix_internships_status'), 'internships', ['status'], unique=False)

    op.create_table(
        'internship_applications',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('internship_id', GUID(), nullable=False),
        sa.Column('candidate_id', GUID(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['internship_id'], ['internships.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidate_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('internship_id', 'candidate_id', name='uq_internship_application_candidate'),
    )
    op.create_index(
        op.f('ix_internship_applications_internship_id'), 'internship_applications', ['internship_id'], unique=False
    )
    op.create_index(
        op.f('ix_internship_applications_candidate_id'), 'internship_applications', ['candidate_id'], unique=False
    )

    # University side
    op.create_table(
        'internship_requests',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('university_id', GUID(), nullable=False),
        sa.Column('specialty', sa.String(length=255), nullable=False),
        sa.Column('student_count', sa.Integer(), nullable=False),
        sa.Column('period', sa.String(length=100), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('skills', JSON(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('is_remote', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('selected_response_id', GUID(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['university_id'], ['university_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_internship_requests_university_id'), 'internship_requests', ['university_id'], unique=False
    )
    op.create_index(op.f('ix_internship_requests_specialty'), 'internship_requests', ['specialty'], unique=False)
    op.create_index(op.f('ix_internship_requests_status'), 'internship_requests', ['status'], unique=False)

    op.create_table(
        'company_responses',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('internship_request_id', GUID(), nullable=False),
        sa.Column('hr_id', GUID(), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('responded_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['internship_request_id'], ['internship_requests.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['hr_id'], ['hr_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('internship_request_id', 'hr_id', name='uq_company_response_request_hr'),
    )
    op.create_index(
        op.f('ix_company_responses_internship_request_id'), 'company_responses', ['internship_request_id'], unique=False
    )
    op.create_index(op.f('ix_company_responses_hr_id'), 'company_responses', ['hr_id'], unique=False)

    op.create_table(
        'students',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('university_id', GUID(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('student_id', sa.String(length=50), nullable=False),
        sa.Column('year_of_study', sa.Integer(), nullable=False),
        sa.Column('major', sa.String(length=255), nullable=False),
        sa.Column('gpa', sa.Float(), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['university_id'], ['university_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('university_id', 'student_id', name='uq_student_university_number'),
    )
    op.create_index(op.f('ix_students_university_id'), 'students', ['university_id'], unique=False)

    op.create_table(
        'student_skills',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('student_id', GUID(), nullable=False),
        sa.Column('skill_id', GUID(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['skill_id'], ['skills.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'skill_id', name='uq_student_skill'),
    )
    op.create_index(op.f('ix_student_skills_student_id'), 'student_skills', ['student_id'], unique=False)
    op.create_index(op.f('ix_student_skills_skill_id'), 'student_skills', ['skill_id'], unique=False)

    op.create_table(
        'notifications',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('target_roles', JSON(), nullable=False),
        sa.Column('created_by', GUID(), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_notifications_type'), 'notifications', ['type'], unique=False)


def downgrade() -> None:
    for table in (
        'notifications',
        'student_skills',
        'students',
        'company_responses',
        'internship_requests',
        'internship_applications',
        'internships',
        'moderation_logs',
        'applications',
        'job_skills',
        'jobs',
        'skills',
        'admin_profiles',
        'university_profiles',
        'candidate_profiles',
        'hr_profiles',
        'users',
    ):
        op.drop_table(table)
    sa.Enum(name='user_role').drop(op.get_bind(), checkfirst=True)
