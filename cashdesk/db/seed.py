# cashdesk/db/seed.py
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from cashdesk.core import config
from cashdesk.core.logging import log_json
from cashdesk.db.base import Base
from cashdesk.db.get_db import SessionLocal, engine
from cashdesk.models.admin import Admin
from cashdesk.models.cashier import Cashier
from cashdesk.models.enums import TransactionType
from cashdesk.models.transaction import Transaction
from cashdesk.utils.auth import hash_password

logger = logging.getLogger(__name__)

DEMO_CASHIER_PASSWORD = "cashier123"

DEMO_CASHIERS = [
    ("CASH001", "John Doe", "+1234567890", "123 Main St, City", "john@example.com"),
    ("CASH002", "Jane Smith", "+1987654321", "456 Oak Ave, City", "jane@example.com"),
]

DEMO_TRANSACTIONS = [
    ("TXN001", "CASH001", "150.50", TransactionType.sale, "Customer purchase - groceries"),
    ("TXN002", "CASH001", "89.99", TransactionType.sale, "Customer purchase - electronics"),
    ("TXN003", "CASH002", "234.75", TransactionType.sale, "Customer purchase - clothing"),
    ("TXN004", "CASH002", "45.20", TransactionType.refund, "Product return - damaged item"),
    ("TXN005", "CASH001", "312.80", TransactionType.sale, "Customer purchase - home goods"),
]


def seed_admin(db: Session) -> None:
    if db.query(Admin).filter(Admin.admin_id == config.ADMIN_ID).first():
        return
    db.add(Admin(admin_id=config.ADMIN_ID, hashed_password=hash_password(config.ADMIN_PASSWORD)))
    db.commit()
    log_json(logger, {"event": "admin_seeded", "admin_id": config.ADMIN_ID})


def seed_demo_data(db: Session) -> None:
    """Insert the demo cashiers and transactions, skipping any that already exist."""
    for cashier_id, name, mobile, address, email in DEMO_CASHIERS:
        exists = db.query(Cashier).filter(
            (Cashier.cashier_id == cashier_id) | (Cashier.email == email)
        ).first()
        if exists:
            continue
        db.add(Cashier(
            cashier_id=cashier_id,
            name=name,
            mobile=mobile,
            address=address,
            email=email,
            hashed_password=hash_password(DEMO_CASHIER_PASSWORD),
        ))

    # Spread creation times so the newest-first ordering is stable
    base_time = datetime.now(timezone.utc) - timedelta(minutes=len(DEMO_TRANSACTIONS))
    for offset, (reference, cashier_id, amount, txn_type, description) in enumerate(DEMO_TRANSACTIONS):
        if db.query(Transaction).filter(Transaction.transaction_id == reference).first():
            continue
        db.add(Transaction(
            transaction_id=reference,
            cashier_id=cashier_id,
            amount=Decimal(amount),
            type=txn_type,
            description=description,
            created_at=base_time + timedelta(minutes=offset),
        ))

    db.commit()
    log_json(logger, {"event": "demo_data_seeded"})


def init_db() -> None:
    """Create the schema and seed it. Must finish before requests are served."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin(db)
        if config.SEED_DEMO_DATA:
            seed_demo_data(db)
    finally:
        db.close()
