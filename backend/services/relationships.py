import logging

from sqlmodel import Session

from models.relationship import (
    FollowLevel,
    RelationKind,
    RelationshipEdge,
    RelationshipStatus,
    TargetType,
)
from services.errors import (
    DuplicateRequestError,
    Forbidden,
    NotFound,
    PreconditionFailed,
    SelfRelationshipError,
)
from services.store import RelationshipStore

logger = logging.getLogger("acadnet.relationships")


def send_request(
    session: Session,
    *,
    subject_id: str,
    object_id: str,
    kind: RelationKind,
    target_type: TargetType = TargetType.user,
    level: FollowLevel | None = None,
    require_approval: bool = False,
) -> RelationshipEdge:
    """Open a relationship from subject to object.

    Friendships start pending and wait for the object to answer. Follows are
    accepted right away unless the target asks for approval.
    """
    if subject_id == object_id:
        raise SelfRelationshipError()
    if kind == RelationKind.friendship:
        target_type = TargetType.user

    store = RelationshipStore(session)
    existing = store.find_by_pair(subject_id, object_id, kind, target_type)
    if existing:
        match existing.status:
            case RelationshipStatus.accepted:
                raise DuplicateRequestError(
                    "Already friends."
                    if kind == RelationKind.friendship
                    else "Already following."
                )
            case RelationshipStatus.pending:
                raise DuplicateRequestError("A request is already pending.")
            case _:
                raise DuplicateRequestError("This relationship is blocked.")

    if kind == RelationKind.friendship:
        status = RelationshipStatus.pending
        level = None
    else:
        status = (
            RelationshipStatus.pending
            if require_approval
            else RelationshipStatus.accepted
        )
        level = level or FollowLevel.public

    low, high = RelationshipEdge.pair_slots(kind, subject_id, object_id)
    edge = RelationshipEdge(
        kind=kind,
        subject_id=subject_id,
        object_id=object_id,
        target_type=target_type,
        slot_low=low,
        slot_high=high,
        status=status,
        level=level,
    )
    edge = store.insert(edge)
    logger.debug(
        f"{kind.value} {subject_id} -> {target_type.value}:{object_id} "
        f"created {status.value}"
    )
    return edge


def _answerable(
    store: RelationshipStore,
    edge_id: str,
    acting_user_id: str,
    kind: RelationKind | None,
) -> RelationshipEdge:
    edge = store.get(edge_id)
    if kind is not None and edge.kind != kind:
        raise NotFound()
    if edge.object_id != acting_user_id:
        raise Forbidden("Only the recipient can answer this request.")
    if edge.status != RelationshipStatus.pending:
        raise PreconditionFailed(f"No pending request, it is {edge.status.value}.")
    return edge


def accept(
    session: Session,
    *,
    edge_id: str,
    acting_user_id: str,
    kind: RelationKind | None = None,
) -> RelationshipEdge:
    store = RelationshipStore(session)
    _answerable(store, edge_id, acting_user_id, kind)
    return store.update_status(
        edge_id, RelationshipStatus.pending, RelationshipStatus.accepted
    )


def reject(
    session: Session,
    *,
    edge_id: str,
    acting_user_id: str,
    kind: RelationKind | None = None,
) -> RelationshipEdge | None:
    """Friendships are dropped on rejection, follows are kept as blocked
    so the follower cannot simply ask again."""
    store = RelationshipStore(session)
    edge = _answerable(store, edge_id, acting_user_id, kind)
    if edge.kind == RelationKind.friendship:
        store.delete(edge_id, require_status=RelationshipStatus.pending)
        logger.debug(f"Friend request {edge_id} rejected")
        return None
    return store.update_status(
        edge_id, RelationshipStatus.pending, RelationshipStatus.blocked
    )


def remove(
    session: Session,
    *,
    acting_user_id: str,
    subject_id: str,
    object_id: str,
    kind: RelationKind,
    target_type: TargetType = TargetType.user,
) -> None:
    """Drop an accepted relationship: unfriend, unfollow, or remove a follower.
    Either party may do it."""
    if acting_user_id not in (subject_id, object_id):
        raise Forbidden()
    store = RelationshipStore(session)
    edge = store.find_by_pair(subject_id, object_id, kind, target_type)
    if edge is None:
        raise NotFound(
            "No existing friendship."
            if kind == RelationKind.friendship
            else "Not following."
        )
    if not edge.involves(acting_user_id):
        raise Forbidden()
    if edge.status != RelationshipStatus.accepted:
        raise PreconditionFailed(
            f"Only accepted relationships can be removed, this one is "
            f"{edge.status.value}."
        )
    store.delete(edge.id, require_status=RelationshipStatus.accepted)


def cancel_request(
    session: Session,
    *,
    acting_user_id: str,
    other_id: str,
    kind: RelationKind,
    target_type: TargetType = TargetType.user,
) -> None:
    """Withdraw a request the acting user sent and nobody answered yet"""
    store = RelationshipStore(session)
    edge = store.find_by_pair(acting_user_id, other_id, kind, target_type)
    if edge is None:
        raise NotFound("No request to cancel.")
    if edge.subject_id != acting_user_id:
        raise Forbidden("Only the requester can cancel a request.")
    if edge.status != RelationshipStatus.pending:
        raise PreconditionFailed(f"No pending request, it is {edge.status.value}.")
    store.delete(edge.id, require_status=RelationshipStatus.pending)


def update_level(
    session: Session, *, edge_id: str, acting_user_id: str, level: FollowLevel
) -> RelationshipEdge:
    store = RelationshipStore(session)
    edge = store.get(edge_id)
    if edge.kind != RelationKind.follow:
        raise PreconditionFailed("Only follows have a level.")
    if edge.subject_id != acting_user_id:
        raise Forbidden("Only the follower can change the follow level.")
    if edge.status != RelationshipStatus.accepted:
        raise PreconditionFailed(
            f"Only accepted follows have a level, this one is {edge.status.value}."
        )
    return store.update_level(edge_id, level)
