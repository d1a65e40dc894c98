# app/routers/auth.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_token_payload
from app.schemas.user import SyncUserRequest, SyncUserResponse, UserResponse
from app.services.user import UserService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/sync-user", response_model=SyncUserResponse)
def sync_user(
    data: Optional[SyncUserRequest] = Body(None),
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: Session = Depends(get_db),
):
    """
    Create or update the local user after an identity-provider login.
    Requires a valid bearer token; the user is matched by its email claim.
    """
    user, created = UserService(db).sync_user(payload, data)
    return SyncUserResponse(
        created=created, user=UserResponse.model_validate(user)
    )
