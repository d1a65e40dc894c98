from sqlalchemy import Column, Integer, String, Text

from app.core.database import Base


class Unit(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Unit(id={self.id}, title='{self.title}')>"
