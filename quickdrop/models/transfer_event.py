from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class TransferLog(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_name = Column(String(255), nullable=False)
    sender_ip = Column(String(50), nullable=False, default="")
    receiver_name = Column(String(255), nullable=False)
    receiver_ip = Column(String(50), nullable=False, default="")
    file_name = Column(String(255), nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)
    file_type = Column(String(50), nullable=False, default="")
    timestamp = Column(DateTime(timezone=True), nullable=False)
    successful = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("file_size >= 0", name="ck_logs_file_size_nonneg"),
        Index("ix_logs_timestamp", "timestamp"),
    )
