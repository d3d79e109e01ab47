# cashdesk/models/admin.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, DateTime, Uuid
from cashdesk.db.base import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    admin_id = Column(Text, unique=True, nullable=False)
    hashed_password = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
