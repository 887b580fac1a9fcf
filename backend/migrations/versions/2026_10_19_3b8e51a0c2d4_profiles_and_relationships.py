"""profiles and relationships

Revision ID: 3b8e51a0c2d4
Revises:
Create Date: 2026-10-19 10:12:41.508113

"""

from alembic import op
import sqlalchemy as sa
import sqlmodel

from models import UtcAwareDateTime

# revision identifiers, used by Alembic.
revision = "3b8e51a0c2d4"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("full_name", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("avatar_url", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("bio", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("institution", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("course", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("created_at", UtcAwareDateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("profiles", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_profiles_full_name"), ["full_name"], unique=False
        )
        batch_op.create_index(
            batch_op.f("ix_profiles_institution"), ["institution"], unique=False
        )

    op.create_table(
        "relationships",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column(
            "kind",
            sa.Enum("friendship", "follow", name="relationkind"),
            nullable=False,
        ),
        sa.Column("subject_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("object_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column(
            "target_type",
            sa.Enum("user", "group", "page", "entity", name="targettype"),
            nullable=False,
        ),
        sa.Column("slot_low", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("slot_high", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "accepted", "blocked", name="relationshipstatus"),
            nullable=False,
        ),
        sa.Column(
            "level",
            sa.Enum(
                "public", "member", "moderator", "admin", "owner", name="followlevel"
            ),
            nullable=True,
        ),
        sa.Column("created_at", UtcAwareDateTime(timezone=True), nullable=False),
        sa.Column("updated_at", UtcAwareDateTime(timezone=True), nullable=False),
        sa.CheckConstraint("subject_id <> object_id", name="ck_relationship_not_self"),
        sa.ForeignKeyConstraint(
            ["subject_id"],
            ["profiles.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "kind", "target_type", "slot_low", "slot_high", name="uq_relationship_pair"
        ),
    )
    with op.batch_alter_table("relationships", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_relationships_kind"), ["kind"], unique=False
        )
        batch_op.create_index(
            "ix_relationships_object_status", ["object_id", "status"], unique=False
        )
        batch_op.create_index(
            "ix_relationships_subject_status", ["subject_id", "status"], unique=False
        )


def downgrade() -> None:
    with op.batch_alter_table("relationships", schema=None) as batch_op:
        batch_op.drop_index("ix_relationships_subject_status")
        batch_op.drop_index("ix_relationships_object_status")
        batch_op.drop_index(batch_op.f("ix_relationships_kind"))

    op.drop_table("relationships")

    with op.batch_alter_table("profiles", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_profiles_institution"))
        batch_op.drop_index(batch_op.f("ix_profiles_full_name"))

    op.drop_table("profiles")
