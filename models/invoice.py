# models/invoice.py
from datetime import date
from decimal import Decimal

from sqlalchemy import (
     Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum, UniqueConstraint, func
)
from sqlalchemy.orm import relationship
from .base import Base, enum_values
from .enums import InvoiceStatus


class Invoice(Base):
     """
     Invoice model - one billing record per tenant, unit and calendar month.

     ``month`` is the human label ("October 2026"). The unique constraint on
     (tenant_id, unit_id, month) keeps invoice creation idempotent.
     """
     __tablename__ = "invoices"
     __table_args__ = (
          UniqueConstraint("tenant_id", "unit_id", "month", name="uq_invoices_tenant_unit_month"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_no = Column(String(50), nullable=False, unique=True)

     # Foreign keys
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)
     lease_id = Column(Integer, ForeignKey("leases.id", ondelete="SET NULL"), nullable=True, index=True)

     # Invoice details
     month = Column(String(30), nullable=False)
     rent = Column(Numeric(12, 2), default=0, nullable=False)
     service_fees = Column(Numeric(12, 2), default=0, nullable=False)
     amount = Column(Numeric(12, 2), default=0, nullable=False)
     paid_amount = Column(Numeric(12, 2), default=0, nullable=False)
     balance_due = Column(Numeric(12, 2), default=0, nullable=False)
     status = Column(
          Enum(InvoiceStatus, name="invoice_status", values_callable=enum_values, create_constraint=True),
          default=InvoiceStatus.SENT,
          nullable=False,
          index=True
     )
     due_date = Column(Date, nullable=False, index=True)
     paid_at = Column(DateTime, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     tenant = relationship("User", back_populates="invoices")
     lease = relationship("Lease", back_populates="invoices")

     def __repr__(self):
          return f"<Invoice(id={self.id}, invoice_no='{self.invoice_no}', month='{self.month}', amount={self.amount})>"

     @property
     def is_overdue(self) -> bool:
          """Check if invoice is past due date and unpaid."""
          return self.status == InvoiceStatus.SENT and self.due_date < date.today()

     def apply_rent(self, rent: Decimal) -> None:
          """Reprice the invoice, keeping whatever has already been paid."""
          self.rent = rent
          self.amount = Decimal(rent) + Decimal(self.service_fees or 0)
          self.balance_due = self.amount - Decimal(self.paid_amount or 0)
