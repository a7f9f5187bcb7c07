from fastapi import Depends
from sqlalchemy.orm import Session

from eduplatform.database import get_db
from eduplatform.models.material import Material

MATERIAL_FIELDS = ('title', 'content')


class MaterialRepository:
    def __init__(self, db: Session):
        self.db = db

    def all_for_course(self, course_id: int) -> list[Material]:
        return self.db.query(Material).filter(Material.course_id == course_id).order_by(Material.id).all()

    def get(self, course_id: int, material_id: int) -> Material | None:
        return (
            self.db.query(Material)
            .filter(Material.course_id == course_id, Material.id == material_id)
            .first()
        )

    def insert(self, course_id: int, *, title: str, content: str | None) -> Material:
        material = Material(course_id=course_id, title=title, content=content)
        self.db.add(material)
        self._commit()
        self.db.refresh(material)
        return material

    def update(self, material: Material, changes: dict) -> Material:
        for field, value in changes.items():
            if field in MATERIAL_FIELDS:
                setattr(material, field, value)
        self._commit()
        self.db.refresh(material)
        return material

    def delete(self, course_id: int, material_id: int) -> int:
        material = self.get(course_id, material_id)
        if material is None:
            return 0
        self.db.delete(material)
        self._commit()
        return 1

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def get_material_repository(db: Session = Depends(get_db)) -> MaterialRepository:
    return MaterialRepository(db)
