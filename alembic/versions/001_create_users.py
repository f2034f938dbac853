"""001: create users table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              SERIAL          PRIMARY KEY,
            name            VARCHAR(100)    NOT NULL,
            email           VARCHAR(255)    NOT NULL,
            gender          VARCHAR(16),
            role            VARCHAR(16)     NOT NULL DEFAULT 'user',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_email       UNIQUE (email),
            CONSTRAINT ck_users_name_len    CHECK (LENGTH(name) BETWEEN 2 AND 100),
            CONSTRAINT ck_users_gender      CHECK (gender IN ('male', 'female', 'other')),
            CONSTRAINT ck_users_role        CHECK (role IN ('user', 'admin', 'moderator'))
        );
    """)
    op.execute("CREATE INDEX idx_users_created_at ON users (created_at DESC, id DESC);")
    op.execute("COMMENT ON TABLE users IS 'User records; single-record reads are cached in Redis under user:{id}';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
