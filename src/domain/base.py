"""Shared base for SQLModel table entities"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel


def generate_uuid() -> str:
    """Generate a string UUID used as a row identifier"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_column() -> Column:
    """Timezone-aware timestamp column; each field needs its own Column"""
    return Column(DateTime(timezone=True), nullable=False)


class BaseModel(SQLModel):
    """Base class for all persisted domain entities"""
    pass
