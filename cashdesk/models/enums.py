# cashdesk/models/enums.py
import enum


class AppRole(enum.Enum):
    admin = "admin"
    cashier = "cashier"


class TransactionType(enum.Enum):
    sale = "sale"
    refund = "refund"
    void = "void"
