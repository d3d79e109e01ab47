# cashdesk/services/cashier_service.py
import logging
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cashdesk.core import config
from cashdesk.core.errors import DuplicateError, NotFoundError, ValidationError
from cashdesk.core.logging import log_json
from cashdesk.models.cashier import Cashier
from cashdesk.utils.auth import hash_password
from cashdesk.utils.helpers import as_utc_iso, like_pattern, mask_email, parse_uuid
from cashdesk.utils.validation_functions import (
    is_blank,
    validate_email,
    validate_mobile,
    validate_password_length,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("cashierId", "name", "mobile", "address", "email", "password")
UPDATABLE_FIELDS = ("name", "mobile", "address", "email", "password")


def serialize_cashier(cashier: Cashier) -> dict:
    return {
        "id": str(cashier.id),
        "cashierId": cashier.cashier_id,
        "name": cashier.name,
        "mobile": cashier.mobile,
        "address": cashier.address,
        "email": cashier.email,
        "createdAt": as_utc_iso(cashier.created_at),
        "updatedAt": as_utc_iso(cashier.updated_at),
    }


def _check_field(field: str, value: str):
    if field == "email" and not validate_email(value):
        raise ValidationError("Invalid email format")
    if field == "mobile" and not validate_mobile(value):
        raise ValidationError(f"Mobile number must contain at least {config.MIN_MOBILE_DIGITS} digits")
    if field == "password" and not validate_password_length(value):
        raise ValidationError(f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters")


def _commit_unique(db: Session, message: str):
    # Unique constraints settle concurrent inserts the pre-checks could not see
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(message)


def _get_or_404(db: Session, cashier_id: str) -> Cashier:
    pk = parse_uuid(cashier_id)
    cashier = db.query(Cashier).filter(Cashier.id == pk).first() if pk else None
    if not cashier:
        raise NotFoundError("Cashier not found")
    return cashier


def create_cashier(db: Session, body: dict) -> Cashier:
    if any(is_blank(body.get(field)) for field in REQUIRED_FIELDS):
        raise ValidationError("All fields are required")

    values = {field: str(body[field]).strip() for field in REQUIRED_FIELDS}
    # Passwords are taken as typed
    values["password"] = str(body["password"])
    for field in ("email", "mobile", "password"):
        _check_field(field, values[field])

    if db.query(Cashier).filter(Cashier.cashier_id == values["cashierId"]).first():
        raise DuplicateError("Cashier ID already exists")
    if db.query(Cashier).filter(Cashier.email == values["email"]).first():
        raise DuplicateError("Email already exists")

    now = datetime.now(timezone.utc)
    cashier = Cashier(
        cashier_id=values["cashierId"],
        name=values["name"],
        mobile=values["mobile"],
        address=values["address"],
        email=values["email"],
        hashed_password=hash_password(values["password"]),
        created_at=now,
        updated_at=now,
    )
    db.add(cashier)
    _commit_unique(db, "Cashier ID or email already exists")
    db.refresh(cashier)

    log_json(logger, {
        "event": "cashier_created",
        "cashier_id": cashier.cashier_id,
        "email": mask_email(cashier.email),
    })
    return cashier


def list_cashiers(db: Session, search: str | None = None) -> list[Cashier]:
    query = db.query(Cashier)
    if search and search.strip():
        pattern = like_pattern(search.strip())
        query = query.filter(or_(
            Cashier.name.ilike(pattern, escape="\\"),
            Cashier.email.ilike(pattern, escape="\\"),
            Cashier.cashier_id.ilike(pattern, escape="\\"),
        ))
    return query.order_by(Cashier.created_at.desc(), Cashier.id.desc()).all()


def get_cashier(db: Session, cashier_id: str) -> Cashier:
    return _get_or_404(db, cashier_id)


def update_cashier(db: Session, cashier_id: str, body: dict) -> Cashier:
    cashier = _get_or_404(db, cashier_id)

    if "cashierId" in body and str(body["cashierId"]).strip() != cashier.cashier_id:
        raise ValidationError("Cashier ID cannot be changed")

    changes = {}
    for field in UPDATABLE_FIELDS:
        if field not in body:
            continue
        if is_blank(body[field]):
            raise ValidationError(f"{field} cannot be empty")
        value = str(body[field]) if field == "password" else str(body[field]).strip()
        _check_field(field, value)
        changes[field] = value

    if not changes:
        raise ValidationError("No updatable fields provided")

    if "email" in changes:
        clash = db.query(Cashier).filter(
            Cashier.email == changes["email"],
            Cashier.id != cashier.id
        ).first()
        if clash:
            raise DuplicateError("Email already exists")

    for field, value in changes.items():
        if field == "password":
            cashier.hashed_password = hash_password(value)
        else:
            setattr(cashier, field, value)

    cashier.updated_at = datetime.now(timezone.utc)
    _commit_unique(db, "Email already exists")
    db.refresh(cashier)

    log_json(logger, {
        "event": "cashier_updated",
        "cashier_id": cashier.cashier_id,
        "fields": sorted(changes),
    })
    return cashier


def delete_cashier(db: Session, cashier_id: str) -> None:
    """Remove a cashier. Its transactions are left in place."""
    cashier = _get_or_404(db, cashier_id)
    external_id = cashier.cashier_id
    db.delete(cashier)
    db.commit()
    log_json(logger, {"event": "cashier_deleted", "cashier_id": external_id})
