"""Appeal repository."""

from typing import List

from sqlalchemy.orm import Session

from app.models.appeal import AppealModel
from app.repositories.base import BaseRepository


class AppealRepository(BaseRepository[AppealModel]):
    def __init__(self, db: Session):
        super().__init__(db, AppealModel)

    def get_for_activity(self, activity_id: int) -> List[AppealModel]:
        return (
            self.db.query(self.model)
            .filter(self.model.activity_id == activity_id)
            .order_by(self.model.id)
            .all()
        )

    def get_pending_for_activity(self, activity_id: int) -> List[AppealModel]:
        return (
            self.db.query(self.model)
            .filter(
                self.model.activity_id == activity_id,
                self.model.status == "pending",
            )
            .order_by(self.model.id)
            .all()
        )
