"""API representations of relationship rows"""

import datetime
from enum import Enum

from .common import CamelModel
from .profile import ProfileSummary
from .relationship import (
    FollowLevel,
    RelationKind,
    RelationshipEdge,
    RelationshipStatus,
    TargetType,
)


class EdgeOut(CamelModel):
    id: str
    kind: RelationKind
    subject_id: str
    object_id: str
    target_type: TargetType
    status: RelationshipStatus
    level: FollowLevel | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @classmethod
    def from_edge(cls, edge: RelationshipEdge, **extra):
        return cls(
            id=edge.id,
            kind=edge.kind,
            subject_id=edge.subject_id,
            object_id=edge.object_id,
            target_type=edge.target_type,
            status=edge.status,
            level=edge.level,
            created_at=edge.created_at,
            updated_at=edge.updated_at,
            **extra,
        )


class EdgeWithProfile(EdgeOut):
    # The party on the other side of the edge from the viewer
    profile: ProfileSummary | None = None


class Candidate(ProfileSummary):
    bio: str | None = None
    institution: str | None = None
    relationship_status: RelationshipStatus | None = None
    is_requester: bool = False
    edge_id: str | None = None


class RelationView(str, Enum):
    """How a pair looks from the viewer's side"""

    self = "self"
    none = "none"
    pending_outgoing = "pending_outgoing"
    pending_incoming = "pending_incoming"
    accepted = "accepted"
    blocked = "blocked"


class CountDirection(str, Enum):
    followers = "followers"
    following = "following"
