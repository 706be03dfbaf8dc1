# models/__init__.py
from .base import Base
from .enums import (
     RentalMode,
     UnitStatus,
     BedroomStatus,
     LeaseStatus,
     UserRole,
     InvoiceStatus,
     TransactionType,
)
from .user import User
from .property import Property
from .unit import Unit
from .bedroom import Bedroom
from .lease import Lease
from .invoice import Invoice
from .invoice_sequence import InvoiceSequence
from .transaction import Transaction

__all__ = [
     "Base",
     "RentalMode",
     "UnitStatus",
     "BedroomStatus",
     "LeaseStatus",
     "UserRole",
     "InvoiceStatus",
     "TransactionType",
     "User",
     "Property",
     "Unit",
     "Bedroom",
     "Lease",
     "Invoice",
     "InvoiceSequence",
     "Transaction",
]
