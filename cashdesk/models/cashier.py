# cashdesk/models/cashier.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, DateTime, Uuid
from cashdesk.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Cashier(Base):
    __tablename__ = "cashiers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cashier_id = Column(Text, unique=True, nullable=False)
    name = Column(Text, nullable=False)
    mobile = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    email = Column(Text, unique=True, nullable=False)
    hashed_password = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
