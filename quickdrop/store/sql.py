import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickdrop.models.transfer_event import TransferLog
from quickdrop.schemas.transfer_event import TransferEvent, TransferEventIn, to_utc
from quickdrop.store.base import AbstractLogStore, StorageError

logger = logging.getLogger(__name__)


def driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def decode_row(row: TransferLog) -> TransferEvent:
    # Backends without a native boolean hand back 0/1; SQLite drops the offset.
    return TransferEvent(
        id=row.id,
        sender_name=row.sender_name,
        sender_ip=row.sender_ip or "",
        receiver_name=row.receiver_name,
        receiver_ip=row.receiver_ip or "",
        file_name=row.file_name,
        file_size=row.file_size or 0,
        file_type=row.file_type or "",
        timestamp=to_utc(row.timestamp),
        successful=bool(row.successful),
    )


class SqlLogStore(AbstractLogStore):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert(self, event: TransferEventIn) -> int:
        timestamp = event.timestamp or datetime.now(timezone.utc)
        row = TransferLog(
            sender_name=event.sender_name,
            sender_ip=event.sender_ip,
            receiver_name=event.receiver_name,
            receiver_ip=event.receiver_ip,
            file_name=event.file_name,
            file_size=event.file_size,
            file_type=event.file_type,
            timestamp=timestamp,
            successful=event.successful,
        )
        try:
            self.session.add(row)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Error saving log: %s", driver_message(exc))
            raise StorageError(driver_message(exc)) from exc
        return row.id

    async def list_recent(self, limit: int) -> list[TransferEvent]:
        try:
            result = await self.session.execute(
                select(TransferLog)
                .order_by(TransferLog.timestamp.desc(), TransferLog.id.desc())
                .limit(limit)
            )
            rows = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Error fetching logs: %s", driver_message(exc))
            raise StorageError(driver_message(exc)) from exc
        return [decode_row(row) for row in rows]
