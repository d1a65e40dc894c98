# app/services/user.py

import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.decorator import db_exception
from app.models.user import User
from app.schemas.user import SyncUserRequest

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> Optional[User]:
        """
        Retrieves a single user by their ID.
        """
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    @db_exception
    def sync_user(
        self, payload: Dict[str, Any], data: Optional[SyncUserRequest] = None
    ) -> Tuple[User, bool]:
        """
        Create or update the local user for a verified identity-provider token.
        Profile fields in the request body win over the token claims.

        Returns:
            (user, created)
        """
        email = payload["email"]
        username = (data.username if data else None) or payload.get("name")
        avatar = (data.avatar if data else None) or payload.get("picture")

        user = self.get_by_email(email)
        if user:
            if username:
                user.username = username
            if avatar:
                user.avatar = avatar
            if not user.external_id and payload.get("sub"):
                user.external_id = str(payload["sub"])
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"Synced existing user {user.id} ({email})")
            return user, False

        user = User(
            external_id=str(payload["sub"]) if payload.get("sub") else None,
            email=email,
            username=username,
            avatar=avatar,
            role="USER",
            streak=0,
            highest_streak=0,
            completed_exercises=[],
            completed_lessons=[],
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Created user {user.id} ({email})")
        return user, True
