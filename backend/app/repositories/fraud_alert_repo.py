"""Fraud alert repository."""

from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.fraud_alert import FraudAlertModel
from app.repositories.base import BaseRepository


class FraudAlertRepository(BaseRepository[FraudAlertModel]):
    def __init__(self, db: Session):
        super().__init__(db, FraudAlertModel)

    def get_for_activity(self, activity_id: int) -> Optional[FraudAlertModel]:
        """Current row for the activity; callers hold the activity lock."""
        return (
            self.db.query(self.model)
            .populate_existing()
            .filter(self.model.activity_id == activity_id)
            .first()
        )

    def list(
        self,
        *,
        severity: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[FraudAlertModel]:
        """Filtered listing; ordered by id so repeated reads are stable."""
        query = self.db.query(self.model)
        if severity:
            query = query.filter(self.model.severity == severity)
        if status:
            query = query.filter(self.model.status == status)
        return query.order_by(self.model.id).offset(skip).limit(limit).all()
