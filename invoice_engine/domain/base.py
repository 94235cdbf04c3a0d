"""Shared base for SQLModel domain entities"""

import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel


def generate_uuid() -> str:
    """Primary key factory for domain entities"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Timestamp factory for created_at/updated_at; always timezone-aware"""
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    """Base class for all persisted domain entities"""

    pass
