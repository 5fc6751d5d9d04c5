"""Persistence of weather requests."""

from __future__ import annotations

from datetime import datetime
import logging
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db_models import WeatherRequestRecord
from app.errors import PersistenceFailure
from app.models.weather import WeatherSnapshot

logger = logging.getLogger("weatherauto.repositories")


class WeatherRequestRepository:
    """Append-only store of weather requests keyed by requester."""

    def __init__(self, db: Session):
        self.db = db

    def insert(
        self,
        *,
        requester_id: str,
        name: str,
        email: str,
        city: str,
        snapshot: WeatherSnapshot,
    ) -> WeatherRequestRecord:
        record = WeatherRequestRecord(
            id=str(uuid4()),
            requester_id=requester_id,
            name=name,
            email=email,
            city=city,
            temperature=snapshot.temperature,
            condition=snapshot.condition,
            air_quality_label=snapshot.air_quality_label,
            air_quality_index=snapshot.air_quality_index,
            created_at=datetime.utcnow(),
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to save weather request for %s: %s", requester_id, exc)
            raise PersistenceFailure("Failed to save your weather request") from exc

        logger.info("Saved weather request %s for %s", record.id, requester_id)
        return record

    def list_for_requester(self, requester_id: str, limit: int = 50) -> list[WeatherRequestRecord]:
        return (
            self.db.query(WeatherRequestRecord)
            .filter(WeatherRequestRecord.requester_id == requester_id)
            .order_by(WeatherRequestRecord.created_at.desc())
            .limit(limit)
            .all()
        )

    def count_for_requester(self, requester_id: str) -> int:
        return (
            self.db.query(WeatherRequestRecord)
            .filter(WeatherRequestRecord.requester_id == requester_id)
            .count()
        )


__all__ = ["WeatherRequestRepository"]
