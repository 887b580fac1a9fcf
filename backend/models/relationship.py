import datetime
import uuid
from enum import Enum

from sqlalchemy import UniqueConstraint, CheckConstraint, Column, Index
from sqlmodel import SQLModel, Field

from .common import utcnow
from .types import UtcAwareDateTime


class RelationKind(str, Enum):
    friendship = "friendship"
    follow = "follow"


class TargetType(str, Enum):
    user = "user"
    group = "group"
    page = "page"
    entity = "entity"


class RelationshipStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    blocked = "blocked"


class FollowLevel(str, Enum):
    public = "public"
    member = "member"
    moderator = "moderator"
    admin = "admin"
    owner = "owner"


class RelationshipEdge(SQLModel, table=True):
    """One friendship or follow edge.

    Uniqueness lives on (kind, target_type, slot_low, slot_high): friendships
    store the pair canonically ordered, follows store (subject, object) as is,
    so the same constraint gives a symmetric key to one and a directional key
    to the other.
    """

    __tablename__ = "relationships"
    __table_args__ = (
        UniqueConstraint(
            "kind", "target_type", "slot_low", "slot_high", name="uq_relationship_pair"
        ),
        CheckConstraint("subject_id <> object_id", name="ck_relationship_not_self"),
        Index("ix_relationships_object_status", "object_id", "status"),
        Index("ix_relationships_subject_status", "subject_id", "status"),
    )

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    kind: RelationKind = Field(index=True)

    # Request flow: subject asked, object answers
    subject_id: str = Field(foreign_key="profiles.id")
    object_id: str
    target_type: TargetType = Field(default=TargetType.user)

    slot_low: str
    slot_high: str

    status: RelationshipStatus = Field(default=RelationshipStatus.pending)
    level: FollowLevel | None = Field(default=None, nullable=True)

    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )
    updated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )

    # Helpers
    @staticmethod
    def canonical_pair(a: str, b: str) -> tuple[str, str]:
        return (a, b) if a < b else (b, a)

    @staticmethod
    def pair_slots(
        kind: RelationKind, subject_id: str, object_id: str
    ) -> tuple[str, str]:
        if kind == RelationKind.friendship:
            return RelationshipEdge.canonical_pair(subject_id, object_id)
        return subject_id, object_id

    def other_party(self, user_id: str) -> str:
        return self.object_id if user_id == self.subject_id else self.subject_id

    def involves(self, user_id: str) -> bool:
        return user_id in (self.subject_id, self.object_id)
