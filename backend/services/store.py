import logging
from typing import Iterable

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, delete, select, update

import settings
from models.common import utcnow
from models.relationship import (
    FollowLevel,
    RelationKind,
    RelationshipEdge,
    RelationshipStatus,
    TargetType,
)
from services.errors import ConflictError, NotFound, PreconditionFailed
from utils.chunks import chunks
from utils.logs import ratelimited_log

logger = logging.getLogger("acadnet.store")


class RelationshipStore:
    """Row-level access to the relationships table.

    Every mutation is a single statement guarded in its WHERE clause and
    committed right away, so concurrent callers on the same row are decided
    by the database: one wins, the other sees zero affected rows.
    """

    def __init__(self, session: Session):
        self.session = session

    def insert(self, edge: RelationshipEdge) -> RelationshipEdge:
        self.session.add(edge)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            ratelimited_log(
                logger.warning,
                f"Concurrent {edge.kind.value} insert refused "
                f"for {edge.subject_id} -> {edge.object_id}",
            )
            raise ConflictError() from e
        self.session.refresh(edge)
        return edge

    def get(self, edge_id: str) -> RelationshipEdge:
        edge = self.session.get(RelationshipEdge, edge_id, populate_existing=True)
        if edge is None:
            raise NotFound()
        return edge

    def find_by_pair(
        self,
        a: str,
        b: str,
        kind: RelationKind,
        target_type: TargetType = TargetType.user,
    ) -> RelationshipEdge | None:
        """The edge between a and b: either direction for friendships,
        a -> b for follows"""
        low, high = RelationshipEdge.pair_slots(kind, a, b)
        return self.session.exec(
            select(RelationshipEdge).where(
                RelationshipEdge.kind == kind,
                RelationshipEdge.target_type == target_type,
                RelationshipEdge.slot_low == low,
                RelationshipEdge.slot_high == high,
            )
        ).first()

    def find_for_candidates(
        self, user_id: str, candidate_ids: Iterable[str], kind: RelationKind
    ) -> dict[str, RelationshipEdge]:
        """Edges between user_id and each candidate user, keyed by candidate id.

        One query per IN_QUERY_CHUNK candidates instead of one per candidate.
        """
        found: dict[str, RelationshipEdge] = {}
        for block in chunks(candidate_ids, settings.IN_QUERY_CHUNK):
            if kind == RelationKind.friendship:
                pair_filter = or_(
                    and_(
                        RelationshipEdge.slot_low == user_id,
                        RelationshipEdge.slot_high.in_(block),
                    ),
                    and_(
                        RelationshipEdge.slot_high == user_id,
                        RelationshipEdge.slot_low.in_(block),
                    ),
                )
            else:
                pair_filter = and_(
                    RelationshipEdge.subject_id == user_id,
                    RelationshipEdge.object_id.in_(block),
                )
            rows = self.session.exec(
                select(RelationshipEdge).where(
                    RelationshipEdge.kind == kind,
                    RelationshipEdge.target_type == TargetType.user,
                    pair_filter,
                )
            ).all()
            for edge in rows:
                found[edge.other_party(user_id)] = edge
        return found

    def update_status(
        self,
        edge_id: str,
        expected: RelationshipStatus,
        new: RelationshipStatus,
    ) -> RelationshipEdge:
        """Compare-and-set on status: only moves the row if it is still `expected`"""
        result = self.session.exec(
            update(RelationshipEdge)
            .where(
                RelationshipEdge.id == edge_id,
                RelationshipEdge.status == expected,
            )
            .values(status=new, updated_at=utcnow())
        )
        self.session.commit()
        if result.rowcount == 0:
            current = self.get(edge_id)  # NotFound when the row is gone
            raise PreconditionFailed(
                f"Expected a {expected.value} relationship, "
                f"found {current.status.value}."
            )
        logger.debug(f"Relationship {edge_id}: {expected.value} -> {new.value}")
        return self.get(edge_id)

    def update_level(self, edge_id: str, level: FollowLevel) -> RelationshipEdge:
        result = self.session.exec(
            update(RelationshipEdge)
            .where(
                RelationshipEdge.id == edge_id,
                RelationshipEdge.status == RelationshipStatus.accepted,
            )
            .values(level=level, updated_at=utcnow())
        )
        self.session.commit()
        if result.rowcount == 0:
            current = self.get(edge_id)
            raise PreconditionFailed(
                f"Only accepted follows have a level, "
                f"this one is {current.status.value}."
            )
        return self.get(edge_id)

    def delete(
        self, edge_id: str, require_status: RelationshipStatus | None = None
    ) -> None:
        statement = delete(RelationshipEdge).where(RelationshipEdge.id == edge_id)
        if require_status is not None:
            statement = statement.where(RelationshipEdge.status == require_status)
        result = self.session.exec(statement)
        self.session.commit()
        if result.rowcount == 0:
            raise NotFound()
        logger.debug(f"Relationship {edge_id} deleted")
