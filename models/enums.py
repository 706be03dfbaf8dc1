# models/enums.py
"""
Status vocabularies shared by the inventory, lease and billing models.

Values are the strings stored in the database, so they keep the casing the
rest of the back office already uses ("Vacant", "Fully Booked", "DRAFT").
"""
import enum


class RentalMode(str, enum.Enum):
     """How a unit is rented: as one whole, or room by room."""
     FULL_UNIT = "FULL_UNIT"
     BEDROOM_WISE = "BEDROOM_WISE"


class UnitStatus(str, enum.Enum):
     VACANT = "Vacant"
     OCCUPIED = "Occupied"
     FULLY_BOOKED = "Fully Booked"


class BedroomStatus(str, enum.Enum):
     VACANT = "Vacant"
     OCCUPIED = "Occupied"


class LeaseStatus(str, enum.Enum):
     """Lease lifecycle states. Deletion removes the row, so it has no value here."""
     DRAFT = "DRAFT"
     ACTIVE = "Active"
     MOVED = "MOVED"


class UserRole(str, enum.Enum):
     ADMIN = "ADMIN"
     OWNER = "OWNER"
     TENANT = "TENANT"


class InvoiceStatus(str, enum.Enum):
     """Invoice payment status. 'sent' means issued and unpaid."""
     DRAFT = "draft"
     SENT = "sent"
     PAID = "paid"
     OVERDUE = "overdue"


class TransactionType(str, enum.Enum):
     INCOME = "Income"
     EXPENSE = "Expense"
     LIABILITY = "Liability"
