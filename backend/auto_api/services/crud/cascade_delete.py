"""
Cascade Delete Service for the Auto aggregate.

Deletes an Auto together with everything it owns, children first so every
foreign key is satisfied at each step:

    Engine -> each Repair -> AutoFile -> Auto

All four steps run inside one transaction(); if any step raises, every
deletion is rolled back and the exception propagates.

Usage:
    from auto_api.services.crud.cascade_delete import CascadeDeleteService

    service = CascadeDeleteService(db)
    deleted = service.delete_auto(auto)  # auto loaded with repairs
"""

from sqlalchemy import delete
from sqlalchemy.orm import Session

from auto_api.models import Auto, AutoFile, Engine, Repair
from shared.config.logging import get_logger
from shared.infrastructure.db import transaction

logger = get_logger(__name__)


class CascadeDeleteService:
    """Hard delete of an Auto and its Engine, Repairs and AutoFile."""

    def __init__(self, db: Session):
        self._db = db

    def delete_auto(self, auto: Auto) -> bool:
        """
        Delete the aggregate in one transaction.

        Args:
            auto: Auto entity, loaded with its Engine and Repairs

        Returns:
            True if the Auto row itself was deleted
        """
        auto_id = auto.id
        engine_id = auto.engine.id if auto.engine is not None else None
        repair_ids = [r.id for r in auto.repairs]

        with transaction(self._db):
            affected = 0
            if engine_id is not None:
                affected += self._delete_engine(engine_id)
            for repair_id in repair_ids:
                affected += self._delete_repair(repair_id)
            affected += self._delete_file(auto_id)
            deleted = self._delete_auto(auto_id)
            affected += deleted

        logger.info(
            "Auto cascade deleted",
            auto_id=auto_id,
            affected_records=affected,
            repairs=len(repair_ids),
        )
        return deleted > 0

    def _delete_engine(self, engine_id: int) -> int:
        result = self._db.execute(delete(Engine).where(Engine.id == engine_id))
        return result.rowcount

    def _delete_repair(self, repair_id: int) -> int:
        result = self._db.execute(delete(Repair).where(Repair.id == repair_id))
        return result.rowcount

    def _delete_file(self, auto_id: int) -> int:
        result = self._db.execute(delete(AutoFile).where(AutoFile.auto_id == auto_id))
        return result.rowcount

    def _delete_auto(self, auto_id: int) -> int:
        result = self._db.execute(delete(Auto).where(Auto.id == auto_id))
        return result.rowcount
