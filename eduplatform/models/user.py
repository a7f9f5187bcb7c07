"""User model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from eduplatform.auth.passwords import hash_password
from eduplatform.database import Base


class User(Base):
    """Represents a student, teacher or administrator account."""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, index=True)
    login = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(Integer, ForeignKey('roles.id', onupdate='CASCADE', ondelete='CASCADE'), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    fk_role = relationship('Role', lazy='joined')
    tokens = relationship('JwtAuth', back_populates='user', cascade='all, delete-orphan')
    courses = relationship('Course', back_populates='teacher')
    enrolled_courses = relationship('Course', secondary='course_students', back_populates='students')

    @validates('password')
    def _hash_password(self, _key, value):
        # Plain text never reaches the table.
        return hash_password(value)

    @property
    def role_name(self) -> str | None:
        return self.fk_role.role if self.fk_role else None

    def has_permission(self, name: str) -> bool:
        return self.fk_role is not None and self.fk_role.has_permission(name)
