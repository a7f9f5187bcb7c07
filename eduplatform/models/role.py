"""Role and permission model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from eduplatform.database import Base


role_permissions = Table(
    'role_permissions',
    Base.metadata,
    Column('role_id', Integer, ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
    Column('permission_id', Integer, ForeignKey('permissions.id', ondelete='CASCADE'), primary_key=True),
)


class Role(Base):
    """Represents a user role (admin/teacher/student)."""
    __tablename__ = 'roles'

    id = Column(Integer, primary_key=True)
    role = Column(String(50), unique=True, nullable=False)

    permissions = relationship('Permission', secondary=role_permissions, back_populates='roles')

    def has_permission(self, name: str) -> bool:
        return any(permission.permission == name for permission in self.permissions)


class Permission(Base):
    """Represents a named action granted to roles."""
    __tablename__ = 'permissions'

    id = Column(Integer, primary_key=True)
    permission = Column(String(100), unique=True, nullable=False)

    roles = relationship('Role', secondary=role_permissions, back_populates='permissions')
