from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from app.core.database import Base, JSONType


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Identity provider subject (the provider owns authentication)
    external_id = Column(String(64), unique=True, index=True, nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), nullable=True)
    avatar = Column(Text, nullable=True)
    role = Column(String(20), default="USER", server_default="USER", nullable=False)

    # Progress
    streak = Column(Integer, default=0, server_default="0", nullable=False)
    highest_streak = Column(Integer, default=0, server_default="0", nullable=False)
    last_active_date = Column(DateTime(timezone=True), nullable=True)
    completed_exercises = Column(JSONType, nullable=False, default=list)  # [exercise_id, ...]
    completed_lessons = Column(JSONType, nullable=False, default=list)  # [lesson_id, ...]

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @property
    def display_name(self) -> str:
        return self.username or self.email.split("@")[0]

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', streak={self.streak})>"
