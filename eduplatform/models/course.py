"""Course model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eduplatform.database import Base


course_students = Table(
    'course_students',
    Base.metadata,
    Column('course_id', Integer, ForeignKey('courses.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', Integer, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
)


class Course(Base):
    """Represents a course taught by a teacher and attended by students."""
    __tablename__ = 'courses'

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey('categories.id', ondelete='SET NULL'), nullable=True)
    teacher_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    category = relationship('Category', back_populates='courses')
    teacher = relationship('User', back_populates='courses')
    students = relationship('User', secondary=course_students, back_populates='enrolled_courses')
    materials = relationship('Material', back_populates='course', cascade='all, delete-orphan')

    def is_taught_by(self, user) -> bool:
        return self.teacher_id is not None and self.teacher_id == user.id

    def has_student(self, user) -> bool:
        return any(student.id == user.id for student in self.students)
