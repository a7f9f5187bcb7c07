"""Issued JWT model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eduplatform.database import Base


class JwtAuth(Base):
    """Represents the live access token of a user."""
    __tablename__ = 'jwt_auth'

    id = Column(Integer, primary_key=True)
    jwt = Column(String(1024), nullable=False)
    # One token row per user; concurrent sign-ins collide here.
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship('User', back_populates='tokens')
