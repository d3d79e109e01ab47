# cashdesk/services/transaction_service.py
import logging
import math
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import case, distinct, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cashdesk.core import config
from cashdesk.core.errors import DuplicateError, Forbidden, NotFoundError, ValidationError
from cashdesk.core.logging import log_json
from cashdesk.models.cashier import Cashier
from cashdesk.models.enums import AppRole, TransactionType
from cashdesk.models.transaction import Transaction
from cashdesk.utils.auth import Identity
from cashdesk.utils.helpers import as_utc_iso, generate_transaction_reference, parse_uuid
from cashdesk.utils.validation_functions import (
    has_cent_precision,
    is_blank,
    parse_amount,
    validate_transaction_type,
    within_amount_limit,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value) -> float:
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def serialize_transaction(transaction: Transaction, cashier_name: str | None = None) -> dict:
    return {
        "id": str(transaction.id),
        "transactionId": transaction.transaction_id,
        "cashierId": transaction.cashier_id,
        "cashierName": cashier_name,
        "amount": _money(transaction.amount),
        "type": transaction.type.value,
        "description": transaction.description,
        "createdAt": as_utc_iso(transaction.created_at),
    }


def _resolve_cashier_ref(identity: Identity, requested) -> str:
    requested = None if is_blank(requested) else str(requested).strip()
    if identity.role == AppRole.cashier:
        # Cashiers record against their own id only
        if requested is not None and requested != identity.sub:
            raise Forbidden("Cashiers can only record their own transactions")
        return identity.sub
    if requested is None:
        raise ValidationError("Cashier ID is required")
    return requested


def record_transaction(db: Session, identity: Identity, body: dict) -> Transaction:
    cashier_ref = _resolve_cashier_ref(identity, body.get("cashierId"))

    if is_blank(body.get("amount")) or is_blank(body.get("type")):
        raise ValidationError("Cashier ID, amount, and type are required")

    amount = parse_amount(body.get("amount"))
    if amount is None:
        raise ValidationError("Amount must be a number")
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    if not within_amount_limit(amount):
        raise ValidationError("Amount is too large")
    if not has_cent_precision(amount):
        raise ValidationError("Amount must have at most two decimal places")

    txn_type = body.get("type")
    if not validate_transaction_type(txn_type):
        raise ValidationError("Invalid transaction type")

    description = body.get("description")
    description = "" if description is None else str(description).strip()
    if len(description) < config.MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be at least {config.MIN_DESCRIPTION_LENGTH} characters"
        )

    reference = body.get("transactionId")
    if is_blank(reference):
        reference = generate_transaction_reference()
    else:
        reference = str(reference).strip()
        if db.query(Transaction).filter(Transaction.transaction_id == reference).first():
            raise DuplicateError("Transaction ID already exists")

    transaction = Transaction(
        transaction_id=reference,
        cashier_id=cashier_ref,
        amount=amount,
        type=TransactionType(txn_type),
        description=description,
        created_at=datetime.now(timezone.utc),
    )
    db.add(transaction)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError("Transaction ID already exists")
    db.refresh(transaction)

    log_json(logger, {
        "event": "transaction_recorded",
        "transaction_id": transaction.transaction_id,
        "cashier_id": cashier_ref,
        "type": transaction.type.value,
        "amount": format(amount, "f"),
        "recorded_by": identity.sub,
    })
    return transaction


def cashier_name_for(db: Session, cashier_ref: str) -> str | None:
    cashier = db.query(Cashier).filter(Cashier.cashier_id == cashier_ref).first()
    return cashier.name if cashier else None


def list_transactions(
    db: Session,
    page: int = 1,
    limit: int = config.DEFAULT_PAGE_SIZE,
    cashier_id: str | None = None,
    txn_type: str | None = None,
):
    """
    Return one page of transactions, newest first, with pagination metadata.
    Rows whose cashier no longer exists come back with cashierName None.
    """
    filters = []
    if cashier_id:
        filters.append(Transaction.cashier_id == cashier_id)
    if txn_type:
        if not validate_transaction_type(txn_type):
            raise ValidationError("Invalid transaction type")
        filters.append(Transaction.type == TransactionType(txn_type))

    total = db.query(func.count(Transaction.id)).filter(*filters).scalar() or 0

    rows = (
        db.query(Transaction, Cashier.name)
        .outerjoin(Cashier, Cashier.cashier_id == Transaction.cashier_id)
        .filter(*filters)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    pagination = {
        "currentPage": page,
        "totalPages": math.ceil(total / limit),
        "totalTransactions": total,
        "hasNext": page * limit < total,
        "hasPrev": page > 1,
    }
    return [serialize_transaction(txn, name) for txn, name in rows], pagination


def delete_transaction(db: Session, transaction_id: str) -> None:
    pk = parse_uuid(transaction_id)
    transaction = db.query(Transaction).filter(Transaction.id == pk).first() if pk else None
    if not transaction:
        raise NotFoundError("Transaction not found")

    reference = transaction.transaction_id
    db.delete(transaction)
    db.commit()
    log_json(logger, {"event": "transaction_deleted", "transaction_id": reference})


def _sum_of(txn_type: TransactionType):
    return func.coalesce(
        func.sum(case((Transaction.type == txn_type, Transaction.amount), else_=0)),
        0,
    )


def get_stats(db: Session) -> dict:
    row = db.query(
        func.count(Transaction.id),
        _sum_of(TransactionType.sale),
        _sum_of(TransactionType.refund),
        _sum_of(TransactionType.void),
        func.count(distinct(Transaction.cashier_id)),
        func.avg(Transaction.amount),
    ).one()

    total, sales, refunds, voids, active_cashiers, average = row
    sales, refunds, voids = (Decimal(str(value or 0)) for value in (sales, refunds, voids))

    return {
        "totalTransactions": total or 0,
        "totalSales": _money(sales),
        "totalRefunds": _money(refunds),
        "totalVoids": _money(voids),
        "activeCashiers": active_cashiers or 0,
        "avgTransactionAmount": _money(average),
        "netBalance": _money(sales - refunds - voids),
    }
