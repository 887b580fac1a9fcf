import logging

from sqlalchemy import func, or_
from sqlmodel import Session, select

import settings
from models.profile import ProfileSummary
from models.relationship import (
    RelationKind,
    RelationshipEdge,
    RelationshipStatus,
    TargetType,
)
from models.views import (
    Candidate,
    CountDirection,
    EdgeWithProfile,
    RelationView,
)
from services.profiles import (
    get_profile,
    get_summaries,
    search_profiles,
    similar_profiles,
)
from services.store import RelationshipStore

logger = logging.getLogger("acadnet.queries")


def _newest_first(query):
    return query.order_by(RelationshipEdge.created_at.desc(), RelationshipEdge.id)


def _with_profiles(
    session: Session, edges: list[RelationshipEdge], viewer_id: str
) -> list[EdgeWithProfile]:
    # Only user targets have a profile, groups and pages are left bare
    profile_ids = [
        e.other_party(viewer_id)
        for e in edges
        if e.target_type == TargetType.user or e.object_id == viewer_id
    ]
    summaries = get_summaries(session, profile_ids)
    return [
        EdgeWithProfile.from_edge(
            edge, profile=summaries.get(edge.other_party(viewer_id))
        )
        for edge in edges
    ]


def list_incoming_requests(
    session: Session,
    user_id: str,
    kind: RelationKind,
    target_type: TargetType = TargetType.user,
) -> list[EdgeWithProfile]:
    """Pending requests waiting for user_id to answer, newest first,
    each with the requester's profile"""
    edges = session.exec(
        _newest_first(
            select(RelationshipEdge).where(
                RelationshipEdge.kind == kind,
                RelationshipEdge.target_type == target_type,
                RelationshipEdge.object_id == user_id,
                RelationshipEdge.status == RelationshipStatus.pending,
            )
        )
    ).all()
    return _with_profiles(session, list(edges), user_id)


def list_outgoing_requests(
    session: Session, user_id: str, kind: RelationKind
) -> list[EdgeWithProfile]:
    edges = session.exec(
        _newest_first(
            select(RelationshipEdge).where(
                RelationshipEdge.kind == kind,
                RelationshipEdge.subject_id == user_id,
                RelationshipEdge.status == RelationshipStatus.pending,
            )
        )
    ).all()
    return _with_profiles(session, list(edges), user_id)


def list_accepted(
    session: Session,
    user_id: str,
    kind: RelationKind,
    search: str | None = None,
) -> list[EdgeWithProfile]:
    """Accepted edges of `kind` with user_id on either side.

    Each row carries the profile of the other party; `search` filters those
    on the display name, case-insensitively.
    """
    side = or_(
        RelationshipEdge.subject_id == user_id,
        RelationshipEdge.object_id == user_id,
    )
    return _accepted_rows(session, user_id, kind, side, search)


def list_following(
    session: Session, user_id: str, search: str | None = None
) -> list[EdgeWithProfile]:
    """Accepted follows going out of user_id, to users or other targets"""
    side = RelationshipEdge.subject_id == user_id
    return _accepted_rows(session, user_id, RelationKind.follow, side, search)


def _accepted_rows(
    session: Session,
    user_id: str,
    kind: RelationKind,
    side,
    search: str | None,
) -> list[EdgeWithProfile]:
    edges = session.exec(
        _newest_first(
            select(RelationshipEdge).where(
                RelationshipEdge.kind == kind,
                RelationshipEdge.status == RelationshipStatus.accepted,
                side,
            )
        )
    ).all()
    rows = _with_profiles(session, list(edges), user_id)

    if search:
        needle = search.lower()
        rows = [
            row
            for row in rows
            if row.profile and needle in (row.profile.full_name or "").lower()
        ]
    return rows


def list_friends(
    session: Session, user_id: str, search: str | None = None
) -> list[ProfileSummary]:
    """Friendships normalized to the friend's profile"""
    return [
        row.profile
        for row in list_accepted(session, user_id, RelationKind.friendship, search)
        if row.profile is not None
    ]


def list_followers(
    session: Session, target_id: str, target_type: TargetType
) -> list[EdgeWithProfile]:
    edges = session.exec(
        _newest_first(
            select(RelationshipEdge).where(
                RelationshipEdge.kind == RelationKind.follow,
                RelationshipEdge.target_type == target_type,
                RelationshipEdge.object_id == target_id,
                RelationshipEdge.status == RelationshipStatus.accepted,
            )
        )
    ).all()
    return _with_profiles(session, list(edges), target_id)


def count(
    session: Session,
    target_id: str,
    target_type: TargetType = TargetType.user,
    *,
    direction: CountDirection = CountDirection.followers,
    kind: RelationKind = RelationKind.follow,
) -> int:
    """Number of accepted edges around target_id.

    Follows: edges pointing at target_id (followers) or leaving it
    (following, only meaningful for users). Friendships: all the accepted
    edges the user is part of, direction is irrelevant.
    """
    query = select(func.count()).select_from(RelationshipEdge).where(
        RelationshipEdge.kind == kind,
        RelationshipEdge.status == RelationshipStatus.accepted,
    )
    if kind == RelationKind.friendship:
        query = query.where(
            or_(
                RelationshipEdge.subject_id == target_id,
                RelationshipEdge.object_id == target_id,
            )
        )
    elif direction == CountDirection.followers:
        query = query.where(
            RelationshipEdge.object_id == target_id,
            RelationshipEdge.target_type == target_type,
        )
    else:
        query = query.where(RelationshipEdge.subject_id == target_id)
    return session.exec(query).one()


def relationship_status(
    session: Session,
    user_id: str,
    other_id: str,
    kind: RelationKind,
    target_type: TargetType = TargetType.user,
) -> RelationView:
    if user_id == other_id:
        return RelationView.self

    edge = RelationshipStore(session).find_by_pair(
        user_id, other_id, kind, target_type
    )
    if edge is None:
        return RelationView.none
    match edge.status:
        case RelationshipStatus.accepted:
            return RelationView.accepted
        case RelationshipStatus.blocked:
            return RelationView.blocked
        case _:
            if edge.subject_id == user_id:
                return RelationView.pending_outgoing
            return RelationView.pending_incoming


def _clamp_limit(limit: int | None) -> int:
    if limit is None:
        return settings.DEFAULT_SEARCH_LIMIT
    return max(1, min(limit, settings.SEARCH_MAX_RESULTS))


def search_candidates(
    session: Session,
    user_id: str,
    text: str,
    kind: RelationKind,
    limit: int | None = None,
) -> list[Candidate]:
    """Profiles matching `text`, each annotated with its relationship to user_id.

    The relationship check is one batched query over the page of candidates,
    so the page size bounds the work.
    """
    text = (text or "").strip()
    if len(text) < settings.SEARCH_MIN_CHARS:
        return []

    profiles = search_profiles(
        session, text, exclude_id=user_id, limit=_clamp_limit(limit)
    )
    edges = RelationshipStore(session).find_for_candidates(
        user_id, [p.id for p in profiles], kind
    )

    candidates = []
    for profile in profiles:
        edge = edges.get(profile.id)
        candidates.append(
            Candidate(
                id=profile.id,
                full_name=profile.full_name,
                avatar_url=profile.avatar_url,
                bio=profile.bio,
                institution=profile.institution,
                relationship_status=edge.status if edge else None,
                is_requester=bool(edge and edge.subject_id == user_id),
                edge_id=edge.id if edge else None,
            )
        )
    return candidates


def suggest_follows(
    session: Session, user_id: str, limit: int | None = None
) -> list[ProfileSummary]:
    """Users from the same institution or course, not followed yet"""
    profile = get_profile(session, user_id)
    if profile is None:
        return []

    followed = session.exec(
        select(RelationshipEdge.object_id).where(
            RelationshipEdge.kind == RelationKind.follow,
            RelationshipEdge.target_type == TargetType.user,
            RelationshipEdge.subject_id == user_id,
        )
    ).all()
    suggestions = similar_profiles(
        session,
        profile,
        exclude_ids=set(followed),
        limit=limit or settings.SUGGESTIONS_LIMIT,
    )
    logger.debug(f"{len(suggestions)} follow suggestions for {user_id}")
    return [p.summary() for p in suggestions]
