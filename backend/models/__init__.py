"""Models package for ACADNET backend"""

from .common import get_session, CamelModel
from .types import UtcAwareDateTime
from .profile import Profile, ProfileSummary
from .relationship import (
    FollowLevel,
    RelationKind,
    RelationshipEdge,
    RelationshipStatus,
    TargetType,
)

__all__ = [
    "FollowLevel",
    "Profile",
    "ProfileSummary",
    "RelationKind",
    "RelationshipEdge",
    "RelationshipStatus",
    "TargetType",
    "UtcAwareDateTime",
    "get_session",
    "CamelModel",
]
