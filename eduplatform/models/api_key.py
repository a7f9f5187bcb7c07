"""API key model definitions."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from eduplatform.database import Base


class ApiKey(Base):
    """Represents a key accepted by the API-key authentication scheme."""
    __tablename__ = 'api_keys'

    id = Column(Integer, primary_key=True)
    key = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
