from fastapi import Depends, Request, HTTPException
from sqlmodel import Session

import settings
from models.common import get_session
from models.profile import Profile


def get_current_user_id(request: Request) -> str | None:
    # Identity is asserted by the auth gateway in front of us
    return request.headers.get(settings.USER_ID_HEADER) or None


def get_current_user(
    request: Request, session: Session = Depends(get_session)
) -> Profile | None:
    user_id = get_current_user_id(request)
    if not user_id:
        return None
    return session.get(Profile, user_id)


def current_user(user: Profile | None = Depends(get_current_user)) -> Profile:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_user_or_404(session: Session, user_id: str) -> Profile:
    user = session.get(Profile, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
