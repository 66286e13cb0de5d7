"""Activity repository."""

from typing import Iterator, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.activity import ActivityModel
from app.repositories.base import BaseRepository


class ActivityRepository(BaseRepository[ActivityModel]):
    def __init__(self, db: Session):
        super().__init__(db, ActivityModel)

    def get_with_evidence(self, activity_id: int) -> Optional[ActivityModel]:
        return (
            self.db.query(self.model)
            .options(selectinload(self.model.all_evidence))
            .filter(self.model.id == activity_id)
            .first()
        )

    def list(
        self,
        *,
        student_id: Optional[str] = None,
        status: Optional[str] = None,
        mentor_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[ActivityModel]:
        """Filtered listing, newest activity date first."""
        query = self.db.query(self.model).options(selectinload(self.model.all_evidence))
        if student_id:
            query = query.filter(self.model.student_id == student_id)
        if status:
            query = query.filter(self.model.status == status)
        if mentor_id:
            query = query.filter(self.model.mentor_id == mentor_id)
        return (
            query.order_by(self.model.date.desc(), self.model.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_for_update(self, activity_id: int) -> Optional[ActivityModel]:
        """Locked load that also reloads the evidence collection."""
        return (
            self.db.query(self.model)
            .options(selectinload(self.model.all_evidence))
            .populate_existing()
            .with_for_update()
            .filter(self.model.id == activity_id)
            .first()
        )

    def iter_ids(self, *, batch_size: int = 200) -> Iterator[int]:
        """Yield every activity id in ascending order, batch by batch."""
        last_id = 0
        while True:
            batch = [
                row_id
                for (row_id,) in self.db.query(self.model.id)
                .filter(self.model.id > last_id)
                .order_by(self.model.id)
                .limit(batch_size)
                .all()
            ]
            if not batch:
                return
            yield from batch
            last_id = batch[-1]
