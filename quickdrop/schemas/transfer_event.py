from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TransferEventBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sender_name: str
    sender_ip: str = ""
    receiver_name: str
    receiver_ip: str = ""
    file_name: str
    file_size: int = Field(default=0, ge=0)
    file_type: str = ""
    timestamp: datetime | None = None
    successful: bool = False

    @field_validator("sender_ip", "receiver_ip", "file_type", mode="before")
    @classmethod
    def empty_if_null(cls, v: str | None) -> str:
        return "" if v is None else v

    @field_validator("file_size", mode="before")
    @classmethod
    def zero_if_null(cls, v: int | None) -> int:
        return 0 if v is None else v

    @field_validator("successful", mode="before")
    @classmethod
    def false_if_null(cls, v: bool | None) -> bool:
        return False if v is None else v

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime | None) -> datetime | None:
        return None if v is None else to_utc(v)


class TransferEventIn(TransferEventBase):
    @field_validator("sender_name", "receiver_name", "file_name")
    @classmethod
    def non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class TransferEvent(TransferEventBase):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    timestamp: datetime
    successful: StrictBool


class IngestResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    status: str
    message: str
