# cashdesk/utils/validation_functions.py
import re
from decimal import Decimal, InvalidOperation

from cashdesk.core import config
from cashdesk.models.enums import TransactionType

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("1e10")


def validate_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def validate_mobile(mobile: str) -> bool:
    """At least MIN_MOBILE_DIGITS digits once spaces, dashes, '+' etc. are removed."""
    digits = re.sub(r"\D", "", mobile)
    return len(digits) >= config.MIN_MOBILE_DIGITS


def validate_password_length(password: str) -> bool:
    return len(password) >= config.MIN_PASSWORD_LENGTH


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def parse_amount(value) -> Decimal | None:
    """
    Parse a monetary amount from a JSON number or string.
    Returns None when the value is not a finite decimal.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def has_cent_precision(amount: Decimal) -> bool:
    return amount == amount.quantize(CENT)


def within_amount_limit(amount: Decimal) -> bool:
    """Numeric(12, 2) holds at most ten integer digits."""
    return abs(amount) < MAX_AMOUNT


def validate_transaction_type(value) -> bool:
    return isinstance(value, str) and value in TransactionType._value2member_map_
