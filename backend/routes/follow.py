from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from models.common import CamelModel, get_session
from models.profile import Profile, ProfileSummary
from models.relationship import FollowLevel, RelationKind, TargetType
from models.views import Candidate, CountDirection, EdgeOut, EdgeWithProfile
from routes.deps import current_user, get_user_or_404
from services import queries
from services.relationships import (
    accept as svc_accept,
    reject as svc_reject,
    remove as svc_remove,
    send_request as svc_send_request,
    update_level as svc_update_level,
)
from utils.logs import time_it

router = APIRouter(prefix="/follow")

FOLLOW = RelationKind.follow


class FollowIn(CamelModel):
    target_type: TargetType = TargetType.user
    target_id: str
    level: FollowLevel = FollowLevel.public
    require_approval: bool = False


class FollowLevelIn(CamelModel):
    level: FollowLevel


@router.post("", response_model=EdgeOut)
async def follow(
    body: FollowIn,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    if body.target_type == TargetType.user:
        get_user_or_404(session, body.target_id)
    edge = svc_send_request(
        session,
        subject_id=user.id,
        object_id=body.target_id,
        kind=FOLLOW,
        target_type=body.target_type,
        level=body.level,
        require_approval=body.require_approval,
    )
    return EdgeOut.from_edge(edge)


@router.post("/accept/{edge_id}", response_model=EdgeOut)
async def accept_follow(
    edge_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    edge = svc_accept(
        session, edge_id=edge_id, acting_user_id=user.id, kind=FOLLOW
    )
    return EdgeOut.from_edge(edge)


@router.post("/reject/{edge_id}", response_model=EdgeOut)
async def reject_follow(
    edge_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    edge = svc_reject(
        session, edge_id=edge_id, acting_user_id=user.id, kind=FOLLOW
    )
    return EdgeOut.from_edge(edge)


@router.patch("/{edge_id}/level", response_model=EdgeOut)
async def change_level(
    edge_id: str,
    body: FollowLevelIn,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    edge = svc_update_level(
        session, edge_id=edge_id, acting_user_id=user.id, level=body.level
    )
    return EdgeOut.from_edge(edge)


@router.get("/requests", response_model=list[EdgeWithProfile])
async def incoming_requests(
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.list_incoming_requests(session, user.id, FOLLOW)


@router.get("/following", response_model=list[EdgeWithProfile])
async def following(
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.list_following(session, user.id)


@router.get(
    "/followers/{target_type}/{target_id}", response_model=list[EdgeWithProfile]
)
async def followers(
    target_type: TargetType,
    target_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.list_followers(session, target_id, target_type)


@router.get("/count/{target_type}/{target_id}")
async def follow_counts(
    target_type: TargetType,
    target_id: str,
    session: Session = Depends(get_session),
):
    counts = {
        "followers": queries.count(
            session, target_id, target_type, direction=CountDirection.followers
        ),
    }
    if target_type == TargetType.user:
        counts["following"] = queries.count(
            session, target_id, target_type, direction=CountDirection.following
        )
    return counts


@router.get("/status/{target_type}/{target_id}")
async def follow_status(
    target_type: TargetType,
    target_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    status = queries.relationship_status(
        session, user.id, target_id, FOLLOW, target_type
    )
    return {"status": status}


@router.get("/search", response_model=list[Candidate])
@time_it
async def search_users(
    q: str = "",
    limit: int | None = Query(default=None, ge=1),
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.search_candidates(session, user.id, q, FOLLOW, limit)


@router.get("/suggestions", response_model=list[ProfileSummary])
@time_it
async def suggestions(
    limit: int | None = Query(default=None, ge=1, le=20),
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.suggest_follows(session, user.id, limit)


@router.delete("/followers/{follower_id}")
async def remove_follower(
    follower_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    svc_remove(
        session,
        acting_user_id=user.id,
        subject_id=follower_id,
        object_id=user.id,
        kind=FOLLOW,
    )
    return {"message": "Follower removed"}


@router.delete("/{target_type}/{target_id}")
async def unfollow(
    target_type: TargetType,
    target_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    svc_remove(
        session,
        acting_user_id=user.id,
        subject_id=user.id,
        object_id=target_id,
        kind=FOLLOW,
        target_type=target_type,
    )
    return {"message": "Unfollowed"}
