from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from models.common import CamelModel, get_session
from models.profile import Profile, ProfileSummary
from models.relationship import RelationKind
from models.views import Candidate, EdgeOut, EdgeWithProfile, RelationView
from routes.deps import current_user, get_user_or_404
from services import queries
from services.relationships import (
    accept as svc_accept,
    cancel_request as svc_cancel_request,
    reject as svc_reject,
    remove as svc_remove,
    send_request as svc_send_request,
)
from utils.logs import time_it

router = APIRouter(prefix="/friendship")

FRIENDSHIP = RelationKind.friendship


class FriendRequestIn(CamelModel):
    target_user_id: str


@router.post("/request", response_model=EdgeOut)
async def send_friend_request(
    body: FriendRequestIn,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    recipient = get_user_or_404(session, body.target_user_id)
    edge = svc_send_request(
        session, subject_id=user.id, object_id=recipient.id, kind=FRIENDSHIP
    )
    return EdgeOut.from_edge(edge)


@router.post("/accept/{edge_id}", response_model=EdgeOut)
async def accept_request(
    edge_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    edge = svc_accept(
        session, edge_id=edge_id, acting_user_id=user.id, kind=FRIENDSHIP
    )
    return EdgeOut.from_edge(edge)


@router.post("/reject/{edge_id}")
async def reject_request(
    edge_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    svc_reject(
        session, edge_id=edge_id, acting_user_id=user.id, kind=FRIENDSHIP
    )
    return {"success": True}


@router.get("/requests", response_model=list[EdgeWithProfile])
async def incoming_requests(
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.list_incoming_requests(session, user.id, FRIENDSHIP)


@router.get("/requests/outgoing", response_model=list[EdgeWithProfile])
async def outgoing_requests(
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.list_outgoing_requests(session, user.id, FRIENDSHIP)


@router.delete("/request/{user_id}")
async def cancel_request(
    user_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    svc_cancel_request(
        session, acting_user_id=user.id, other_id=user_id, kind=FRIENDSHIP
    )
    return {"success": True}


@router.get("", response_model=list[ProfileSummary])
async def list_friends(
    search: str | None = None,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.list_friends(session, user.id, search)


@router.get("/search", response_model=list[Candidate])
@time_it
async def search_users(
    q: str = "",
    limit: int | None = Query(default=None, ge=1),
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    return queries.search_candidates(session, user.id, q, FRIENDSHIP, limit)


@router.get("/status/{user_id}")
async def friendship_status(
    user_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    """Relationship between the current user and user_id, one of:
    self, none, pending_outgoing, pending_incoming, accepted
    """
    target = get_user_or_404(session, user_id)
    status: RelationView = queries.relationship_status(
        session, user.id, target.id, FRIENDSHIP
    )
    return {"status": status}


@router.get("/count/{user_id}")
async def friends_count(
    user_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    target = get_user_or_404(session, user_id)
    return {"friends": queries.count(session, target.id, kind=FRIENDSHIP)}


@router.delete("/{user_id}")
async def unfriend(
    user_id: str,
    session: Session = Depends(get_session),
    user: Profile = Depends(current_user),
):
    svc_remove(
        session,
        acting_user_id=user.id,
        subject_id=user.id,
        object_id=user_id,
        kind=FRIENDSHIP,
    )
    return {"message": "Unfriended"}
