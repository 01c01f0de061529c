"""
Auto Write Service.

Creates, updates and deletes Autos and replaces their attachment.

Business rules:
- The chassis number is unique (checked before insert, unique index as backstop)
- Updates are guarded by the optimistic-lock version: a token older than the
  persisted version fails, the UPDATE itself only matches the loaded version
- Deleting an Auto removes Engine, Repairs and AutoFile in one transaction
- A created Auto triggers a best-effort notification

Usage:
    from auto_api.services.domain import AutoWriteService

    service = AutoWriteService(db, notifier=MailService(background_tasks))
    auto_id = service.create(body.to_entity())
    new_version = service.update(auto_id, body.model_dump(), '"0"')
    service.delete(auto_id)
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from auto_api.models import Auto, AutoFile
from auto_api.services.crud.cascade_delete import CascadeDeleteService
from auto_api.services.domain.auto_read_service import AutoReadService
from auto_api.services.domain.version import parse_version_token
from auto_api.services.notification import MailService, Notifier
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    AutoNotFoundError,
    ChassisNumberExistsError,
    DatabaseError,
    VersionOutdatedError,
)

logger = get_logger(__name__)

# Scalar business fields an update may replace
UPDATABLE_FIELDS = ("make", "model", "model_year", "category", "price")


class AutoWriteService:
    """Write access to the Auto aggregate."""

    def __init__(self, db: Session, notifier: Notifier | None = None):
        self._db = db
        self._read_service = AutoReadService(db)
        self._notifier = notifier if notifier is not None else MailService()

    # =========================================================================
    # Create
    # =========================================================================

    def create(self, auto: Auto) -> int:
        """
        Persist a new Auto together with its Engine and Repairs.

        Returns:
            The generated id.

        Raises:
            ChassisNumberExistsError: If another Auto uses the chassis number.
        """
        self._validate_create(auto)

        self._db.add(auto)
        try:
            safe_commit(self._db)
        except IntegrityError as e:
            if "chassis_number" in str(e.orig):
                raise ChassisNumberExistsError(auto.chassis_number) from e
            raise DatabaseError("Anlegen eines Autos", error=str(e.orig)) from e

        auto_id = auto.id
        logger.info("Auto created", auto_id=auto_id, chassis_number=auto.chassis_number)

        self._send_notification(auto)
        return auto_id

    def _validate_create(self, auto: Auto) -> None:
        chassis_taken = self._db.scalar(
            select(exists().where(Auto.chassis_number == auto.chassis_number))
        )
        if chassis_taken:
            raise ChassisNumberExistsError(auto.chassis_number)

    def _send_notification(self, auto: Auto) -> None:
        subject = f"Neues Auto {auto.id}"
        engine_name = auto.engine.name if auto.engine is not None else "N/A"
        body = (
            f'Das Auto "{auto.make} {auto.model}" mit dem Motornamen '
            f"<strong>{engine_name}</strong> ist angelegt."
        )
        try:
            self._notifier.notify(subject, body)
        except Exception as e:
            # Notification never fails the create
            logger.error(
                "Notification failed",
                auto_id=auto.id,
                error=str(e),
                error_type=type(e).__name__,
            )

    # =========================================================================
    # Attachment
    # =========================================================================

    def add_file(
        self,
        auto_id: int,
        data: bytes,
        filename: str,
        mimetype: str | None,
    ) -> AutoFile:
        """
        Replace the attachment of an Auto.

        Raises:
            AutoNotFoundError: If the Auto does not exist.
        """
        self._read_service.find_by_id(auto_id)

        self._db.execute(delete(AutoFile).where(AutoFile.auto_id == auto_id))
        auto_file = AutoFile(
            auto_id=auto_id,
            filename=filename,
            mimetype=mimetype,
            data=data,
        )
        self._db.add(auto_file)
        safe_commit(self._db)
        self._db.refresh(auto_file)

        logger.info(
            "Auto file stored",
            auto_id=auto_id,
            filename=filename,
            mimetype=mimetype,
            size=len(data),
        )
        return auto_file

    # =========================================================================
    # Update
    # =========================================================================

    def update(
        self,
        auto_id: int | None,
        data: Mapping[str, Any],
        version_token: str | None,
    ) -> int:
        """
        Merge the scalar business fields onto the persisted Auto.

        id, version, chassis number and relations are never taken from data.

        Returns:
            The new version.

        Raises:
            AutoNotFoundError: If the id is missing or unknown.
            InvalidVersionError: If the version token is malformed.
            VersionOutdatedError: If the token is older than the persisted
                version, or a concurrent update committed first.
        """
        if auto_id is None:
            raise AutoNotFoundError(auto_id)

        version = parse_version_token(version_token)
        auto = self._read_service.find_by_id(auto_id)

        if version < auto.version:
            raise VersionOutdatedError(version, auto_id=auto_id, current_version=auto.version)

        for field in UPDATABLE_FIELDS:
            if field in data:
                setattr(auto, field, data[field])
        if "safety_features" in data:
            auto.safety_feature_list = data["safety_features"]
        auto.touch()

        try:
            safe_commit(self._db)
        except StaleDataError as e:
            raise VersionOutdatedError(version, auto_id=auto_id) from e

        new_version = auto.version
        logger.info("Auto updated", auto_id=auto_id, version=new_version)
        return new_version

    # =========================================================================
    # Delete
    # =========================================================================

    def delete(self, auto_id: int) -> bool:
        """
        Delete the Auto with its Engine, Repairs and AutoFile.

        Returns:
            True if the Auto row was deleted.

        Raises:
            AutoNotFoundError: If the Auto does not exist.
        """
        auto = self._read_service.find_by_id(auto_id, include_repairs=True)
        return CascadeDeleteService(self._db).delete_auto(auto)
