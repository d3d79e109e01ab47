# cashdesk/models/transaction.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, DateTime, Numeric, Enum, Uuid, Index
from cashdesk.db.base import Base
from cashdesk.models.enums import TransactionType


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_created_at", "created_at"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transaction_id = Column(Text, unique=True, nullable=False)
    # Soft reference to cashiers.cashier_id; rows outlive the cashier
    cashier_id = Column(Text, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
