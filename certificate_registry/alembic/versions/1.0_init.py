# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""init

Revision ID: 1.0
Revises:
Create Date: 2026-10-18 09:00:00.000000

Admin authority, issuer & certificate tables.
Will check if tables already exist before attempting to forcefully create them.

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1.0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    inspector = sa.inspect(op.get_bind())
    existing_tables = inspector.get_table_names()
    if "admin" not in existing_tables:
        op.create_table(
            "admin",
            sa.Column("address", sa.String(43), primary_key=True),
            sa.Column("controlling_identity", sa.Text, nullable=False),
            sa.Column("created_at", sa.BigInteger, nullable=False),
        )
    if "issuer" not in existing_tables:
        op.create_table(
            "issuer",
            sa.Column("address", sa.String(43), primary_key=True),
            sa.Column("owner_identity", sa.Text, nullable=False),
            sa.Column("institution_name", sa.Text, nullable=False),
            sa.Column("status", sa.String(16), nullable=False),
            sa.Column("certificates_issued", sa.BigInteger, nullable=False),
            sa.Column("reputation_score", sa.BigInteger, nullable=False),
            sa.Column("registered_at", sa.BigInteger, nullable=False),
        )
    if "certificate" not in existing_tables:
        op.create_table(
            "certificate",
            sa.Column("address", sa.String(43), primary_key=True),
            sa.Column("issuer_identity", sa.Text, nullable=False),
            sa.Column("student_name", sa.Text, nullable=False),
            sa.Column("course_name", sa.Text, nullable=False),
            sa.Column("certificate_hash", sa.Text, nullable=False),
            sa.Column("certificate_id", sa.Text, nullable=False),
            sa.Column("issued_at", sa.BigInteger, nullable=False),
            sa.Column("status", sa.String(16), nullable=False),
        )
        op.create_index("ix_certificate_issuer_identity", "certificate", ["issuer_identity"])


def downgrade() -> None:
    op.drop_table("certificate")
    op.drop_table("issuer")
    op.drop_table("admin")
