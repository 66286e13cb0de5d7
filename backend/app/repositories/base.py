"""Generic base repository with reusable read/write operations."""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from app.database import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Thin data-access layer over SQLAlchemy.

    Subclasses add domain-specific queries.
    Repositories only modify the session (add/flush) - the caller
    controls when to commit or rollback, so a state change and its
    audit entry land in one transaction.
    No delete: activities, alerts and appeals are superseded, never removed.
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    # ── reads ────────────────────────────────────────────────────────

    def get(self, id: int) -> Optional[T]:
        return self.db.query(self.model).filter(self.model.id == id).first()

    def get_for_update(self, id: int) -> Optional[T]:
        """Load a row for mutation, bypassing any stale identity-map copy.

        Callers hold the per-key process lock; FOR UPDATE adds a row lock
        on databases that support it (SQLite ignores it).
        """
        return (
            self.db.query(self.model)
            .populate_existing()
            .with_for_update()
            .filter(self.model.id == id)
            .first()
        )

    # ── writes ───────────────────────────────────────────────────────

    def create(self, obj: T) -> T:
        """Add object to session (caller must commit)."""
        self.db.add(obj)
        self.db.flush()  # Assigns ID without committing
        return obj

    def update(self, obj: T) -> T:
        """Mark object as modified (caller must commit).

        SQLAlchemy's session already tracks changes to attached objects,
        so this method just flushes to validate constraints.
        """
        self.db.flush()
        return obj
