import logging
from typing import Iterable

from sqlalchemy import func, or_
from sqlmodel import Session, select

import settings
from models.profile import Profile, ProfileSummary
from utils.chunks import chunks

logger = logging.getLogger("acadnet.profiles")


def get_profile(session: Session, profile_id: str) -> Profile | None:
    return session.get(Profile, profile_id)


def get_summaries(
    session: Session, profile_ids: Iterable[str]
) -> dict[str, ProfileSummary]:
    """Batch lookup of public profile summaries, keyed by id.
    Unknown ids are simply missing from the result."""
    wanted = list(dict.fromkeys(profile_ids))
    summaries = {}
    for block in chunks(wanted, settings.IN_QUERY_CHUNK):
        for profile in session.exec(select(Profile).where(Profile.id.in_(block))):
            summaries[profile.id] = profile.summary()
    return summaries


def search_profiles(
    session: Session, text: str, *, exclude_id: str, limit: int
) -> list[Profile]:
    """Case-insensitive substring match on the display name"""
    escaped = (
        text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    profiles = list(
        session.exec(
            select(Profile)
            .where(
                Profile.id != exclude_id,
                func.lower(Profile.full_name).like(f"%{escaped}%", escape="\\"),
            )
            .order_by(Profile.full_name, Profile.id)
            .limit(limit)
        ).all()
    )
    logger.debug(f"Profile search {text!r}: {len(profiles)} matches")
    return profiles


def similar_profiles(
    session: Session,
    profile: Profile,
    *,
    exclude_ids: set[str],
    limit: int,
) -> list[Profile]:
    """Profiles sharing the institution or the course of `profile`"""
    affinities = []
    if profile.institution:
        affinities.append(Profile.institution == profile.institution)
    if profile.course:
        affinities.append(Profile.course == profile.course)
    if not affinities:
        return []

    query = select(Profile).where(Profile.id != profile.id, or_(*affinities))
    if exclude_ids:
        query = query.where(Profile.id.not_in(exclude_ids))
    return list(
        session.exec(query.order_by(Profile.full_name, Profile.id).limit(limit)).all()
    )
