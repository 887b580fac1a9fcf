"""Unit tests for database models."""

import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from models.profile import Profile
from models.relationship import (
    RelationKind,
    RelationshipEdge,
    RelationshipStatus,
    TargetType,
)


def _edge(kind, subject_id, object_id, **fields):
    low, high = RelationshipEdge.pair_slots(kind, subject_id, object_id)
    return RelationshipEdge(
        kind=kind,
        subject_id=subject_id,
        object_id=object_id,
        slot_low=low,
        slot_high=high,
        **fields,
    )


class TestProfileModel:
    def test_profile_creation(self, test_session):
        profile = Profile(id="p1", full_name="Paula Pires", institution="UnB")
        test_session.add(profile)
        test_session.commit()

        assert profile.id == "p1"
        assert isinstance(profile.created_at, datetime.datetime)
        assert profile.created_at.tzinfo is not None

    def test_summary_keeps_public_fields_only(self):
        profile = Profile(
            id="p1", full_name="Paula", avatar_url="a.png", bio="secret-ish"
        )
        summary = profile.summary()
        assert summary.model_dump(by_alias=True) == {
            "id": "p1",
            "fullName": "Paula",
            "avatarUrl": "a.png",
        }


class TestPairSlots:
    def test_canonical_pair_orders_ids(self):
        assert RelationshipEdge.canonical_pair("b", "a") == ("a", "b")
        assert RelationshipEdge.canonical_pair("a", "b") == ("a", "b")

    def test_friendship_slots_are_direction_independent(self):
        kind = RelationKind.friendship
        assert RelationshipEdge.pair_slots(
            kind, "zed", "amy"
        ) == RelationshipEdge.pair_slots(kind, "amy", "zed")

    def test_follow_slots_keep_direction(self):
        kind = RelationKind.follow
        assert RelationshipEdge.pair_slots(kind, "zed", "amy") == ("zed", "amy")
        assert RelationshipEdge.pair_slots(kind, "amy", "zed") == ("amy", "zed")

    def test_other_party(self):
        edge = _edge(RelationKind.friendship, "bob", "alice")
        assert edge.other_party("bob") == "alice"
        assert edge.other_party("alice") == "bob"
        assert edge.involves("alice")
        assert not edge.involves("carol")


class TestRelationshipConstraints:
    def test_defaults(self, test_session, alice, bob):
        edge = _edge(RelationKind.friendship, alice.id, bob.id)
        test_session.add(edge)
        test_session.commit()

        assert len(edge.id) == 32
        assert edge.status == RelationshipStatus.pending
        assert edge.target_type == TargetType.user
        assert edge.level is None
        assert edge.created_at.tzinfo is not None

    def test_reverse_friendship_violates_uniqueness(self, test_session, alice, bob):
        test_session.add(_edge(RelationKind.friendship, alice.id, bob.id))
        test_session.commit()

        test_session.add(_edge(RelationKind.friendship, bob.id, alice.id))
        with pytest.raises(IntegrityError):
            test_session.commit()
        test_session.rollback()

    def test_mutual_follows_are_two_rows(self, test_session, alice, bob):
        test_session.add(_edge(RelationKind.follow, alice.id, bob.id))
        test_session.add(_edge(RelationKind.follow, bob.id, alice.id))
        test_session.commit()

        assert len(test_session.exec(select(RelationshipEdge)).all()) == 2

    def test_friendship_and_follow_coexist(self, test_session, alice, bob):
        test_session.add(_edge(RelationKind.friendship, alice.id, bob.id))
        test_session.add(_edge(RelationKind.follow, alice.id, bob.id))
        test_session.commit()

    def test_same_id_on_different_target_types(self, test_session, alice):
        test_session.add(
            _edge(RelationKind.follow, alice.id, "x1", target_type=TargetType.group)
        )
        test_session.add(
            _edge(RelationKind.follow, alice.id, "x1", target_type=TargetType.page)
        )
        test_session.commit()

    def test_self_relationship_violates_check(self, test_session, alice):
        test_session.add(_edge(RelationKind.follow, alice.id, alice.id))
        with pytest.raises(IntegrityError):
            test_session.commit()
        test_session.rollback()
