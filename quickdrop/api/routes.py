import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickdrop.config import settings
from quickdrop.db import get_session
from quickdrop.schemas.transfer_event import (
    ErrorResponse,
    HealthResponse,
    IngestResponse,
    TransferEvent,
    TransferEventIn,
)
from quickdrop.services.transfer_service import TransferLogService
from quickdrop.store.sql import SqlLogStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_service(session: AsyncSession = Depends(get_session)) -> TransferLogService:
    return TransferLogService(SqlLogStore(session), settings.RECENT_LOGS_LIMIT)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", message="Server is running")


@router.get(
    "/logs",
    response_model=list[TransferEvent],
    responses={500: {"model": ErrorResponse}},
)
async def get_logs(
    service: TransferLogService = Depends(get_service),
) -> list[TransferEvent]:
    return await service.recent()


@router.post("/logs", response_model=IngestResponse, responses=ERROR_RESPONSES)
async def post_log(
    body: TransferEventIn,
    service: TransferLogService = Depends(get_service),
) -> IngestResponse:
    log_id = await service.record(body)
    logger.info(
        "New log id=%d %s -> %s file=%s size=%d successful=%s",
        log_id,
        body.sender_name,
        body.receiver_name,
        body.file_name,
        body.file_size,
        body.successful,
    )
    return IngestResponse(success=True)
