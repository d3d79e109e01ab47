# cashdesk/services/auth_service.py
import logging

from sqlalchemy.orm import Session

from cashdesk.core import config
from cashdesk.core.errors import InvalidCredentials, ValidationError
from cashdesk.core.logging import log_json
from cashdesk.models.admin import Admin
from cashdesk.models.cashier import Cashier
from cashdesk.models.enums import AppRole
from cashdesk.utils.auth import create_access_token, verify_password
from cashdesk.utils.validation_functions import is_blank

logger = logging.getLogger(__name__)


def _issue(sub: str, uid: str, role: AppRole, name: str) -> str:
    return create_access_token({"sub": sub, "uid": uid, "role": role.value, "name": name})


def _reject(role: AppRole, identifier: str):
    log_json(logger, {"event": "login_failed", "role": role.value, "identifier": identifier}, logging.WARNING)
    raise InvalidCredentials()


def login(db: Session, role: AppRole, identifier, password) -> dict:
    """
    Check a credential pair for the given role and issue a session token.

    Unknown identifiers and wrong passwords fail the same way so callers
    cannot tell which part was wrong.
    """
    if is_blank(identifier) or is_blank(password):
        label = "Admin ID" if role == AppRole.admin else "Cashier ID"
        raise ValidationError(f"{label} and password are required")

    identifier = str(identifier).strip()

    if role == AppRole.admin:
        admin = db.query(Admin).filter(Admin.admin_id == identifier).first()
        if not admin or not verify_password(str(password), admin.hashed_password):
            _reject(role, identifier)
        token = _issue(admin.admin_id, str(admin.id), role, admin.admin_id)
        user = {"id": str(admin.id), "adminId": admin.admin_id, "role": role.value}
    else:
        cashier = db.query(Cashier).filter(Cashier.cashier_id == identifier).first()
        if not cashier or not verify_password(str(password), cashier.hashed_password):
            _reject(role, identifier)
        token = _issue(cashier.cashier_id, str(cashier.id), role, cashier.name)
        user = {
            "id": str(cashier.id),
            "cashierId": cashier.cashier_id,
            "name": cashier.name,
            "role": role.value,
        }

    log_json(logger, {"event": "login_succeeded", "role": role.value, "identifier": identifier})
    return {
        "token": token,
        "user": user,
        "expires_in": config.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }
