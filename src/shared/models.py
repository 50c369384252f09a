import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime
from sqlalchemy.dialects.postgresql import UUID

class UUIDMixin:
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

class CreatedAtMixin:
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

class TimestampMixin(CreatedAtMixin):
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

class AuditMixin(UUIDMixin, TimestampMixin):
    """Combines UUID and Timestamps for standard entities."""
    pass

class AppendOnlyMixin(UUIDMixin, CreatedAtMixin):
    """UUID and creation time for rows that are never updated."""
    pass
