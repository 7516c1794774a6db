"""
User account model.
"""

from sqlalchemy import Column, Integer, String

from devevents.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), unique=True, index=True, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
