from fastapi import Depends
from sqlalchemy.orm import Session

from eduplatform.database import get_db
from eduplatform.models.course import Course
from eduplatform.models.user import User

COURSE_FIELDS = ('title', 'description', 'category_id', 'teacher_id')


class CourseRepository:
    """Queries and mutations on courses and their enrolled students."""

    def __init__(self, db: Session):
        self.db = db

    def all(self) -> list[Course]:
        return self.db.query(Course).order_by(Course.id).all()

    def get(self, course_id: int) -> Course | None:
        return self.db.query(Course).filter(Course.id == course_id).first()

    def insert(self, *, title: str, description: str | None, category_id: int, teacher_id: int) -> Course:
        course = Course(
            title=title,
            description=description,
            category_id=category_id,
            teacher_id=teacher_id,
        )
        self.db.add(course)
        self._commit()
        self.db.refresh(course)
        return course

    def update(self, course: Course, changes: dict) -> Course:
        for field, value in changes.items():
            if field in COURSE_FIELDS:
                setattr(course, field, value)
        self._commit()
        self.db.refresh(course)
        return course

    def delete(self, course_id: int) -> int:
        course = self.get(course_id)
        if course is None:
            return 0
        # ORM delete so materials and enrollments go with the course.
        self.db.delete(course)
        self._commit()
        return 1

    def enroll(self, course: Course, user: User) -> None:
        course.students.append(user)
        self._commit()

    def leave(self, course: Course, user: User) -> None:
        course.students.remove(user)
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def get_course_repository(db: Session = Depends(get_db)) -> CourseRepository:
    return CourseRepository(db)
