# services/invoice_service.py
"""
Invoice Service - billing side effects of the lease lifecycle.

This service handles invoice numbering, the first invoice of a newly
activated lease, rent back-fill, and the monthly batch the external scheduler
runs. It never commits; callers own the transaction.
"""
import logging
import os
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from models import Invoice, InvoiceSequence, InvoiceStatus, Lease, LeaseStatus

logger = logging.getLogger(__name__)

LEASE_INVOICE_PREFIX = "INV-LEASE"
AUTO_INVOICE_PREFIX = "INV-AUTO"
INVOICE_SEQUENCE = "invoice"

# Day of month the monthly batch invoices fall due
INVOICE_DUE_DAY = int(os.getenv("INVOICE_DUE_DAY", "5"))


def month_label(day: date) -> str:
     """Invoice month label, e.g. date(2026, 10, 17) -> 'October 2026'."""
     return f"{day:%B} {day.year}"


class InvoiceService:
     """Service class for invoice-related business logic."""

     @staticmethod
     def next_invoice_number(db: Session, prefix: str = LEASE_INVOICE_PREFIX) -> str:
          """
          Draw the next invoice number, e.g. 'INV-LEASE-00042'.

          The counter row is locked and incremented inside the caller's
          transaction. On first use it is seeded with the number of existing
          invoices so numbering continues where count-based numbering stopped.
          """
          sequence = (
               db.query(InvoiceSequence)
               .filter(InvoiceSequence.name == INVOICE_SEQUENCE)
               .with_for_update()
               .first()
          )
          if sequence is None:
               existing = db.query(func.count(Invoice.id)).scalar() or 0
               sequence = InvoiceSequence(name=INVOICE_SEQUENCE, last_value=existing)
               db.add(sequence)

          sequence.last_value += 1
          db.flush()
          return f"{prefix}-{sequence.last_value:05d}"

     @staticmethod
     def find_invoice(db: Session, tenant_id: int, unit_id: int, month: str) -> Optional[Invoice]:
          return (
               db.query(Invoice)
               .filter(
                    Invoice.tenant_id == tenant_id,
                    Invoice.unit_id == unit_id,
                    Invoice.month == month,
               )
               .first()
          )

     @staticmethod
     def ensure_invoice_for_month(
          db: Session,
          tenant_id: int,
          unit_id: int,
          month: str,
          rent: Decimal,
          due_date: date,
          lease_id: Optional[int] = None,
          prefix: str = LEASE_INVOICE_PREFIX,
     ) -> Invoice:
          """
          Return the invoice for (tenant, unit, month), creating it if missing.

          Calling this twice for the same triple yields one invoice row.
          """
          existing = InvoiceService.find_invoice(db, tenant_id, unit_id, month)
          if existing is not None:
               logger.debug(
                    "Invoice %s already exists for tenant %s, unit %s, %s",
                    existing.invoice_no, tenant_id, unit_id, month
               )
               return existing

          rent = Decimal(rent or 0)
          invoice = Invoice(
               invoice_no=InvoiceService.next_invoice_number(db, prefix),
               tenant_id=tenant_id,
               unit_id=unit_id,
               lease_id=lease_id,
               month=month,
               rent=rent,
               service_fees=Decimal("0"),
               amount=rent,
               paid_amount=Decimal("0"),
               balance_due=rent,
               status=InvoiceStatus.SENT,
               due_date=due_date,
          )
          db.add(invoice)
          db.flush()  # Flush to get the ID without committing

          logger.info("Created invoice %s (%s) for lease %s", invoice.invoice_no, month, lease_id)
          return invoice

     @staticmethod
     def create_initial_lease_invoice(db: Session, lease: Lease) -> Invoice:
          """
          Create the first invoice when a lease becomes Active.

          Billed for the lease's start month, for the monthly rent, and due on
          the start date.
          """
          start = lease.start_date or date.today()
          return InvoiceService.ensure_invoice_for_month(
               db=db,
               tenant_id=lease.tenant_id,
               unit_id=lease.unit_id,
               month=month_label(start),
               rent=lease.monthly_rent,
               due_date=start,
               lease_id=lease.id,
               prefix=LEASE_INVOICE_PREFIX,
          )

     @staticmethod
     def backfill_lease_rent(db: Session, lease: Lease) -> int:
          """
          Reprice the lease's unpaid zero-amount invoices with its current rent.

          Invoices created while the rent was still unknown are issued for 0;
          once the rent is set they are brought in line.

          Returns:
               Number of invoices updated.
          """
          invoices = (
               db.query(Invoice)
               .filter(
                    Invoice.lease_id == lease.id,
                    Invoice.status != InvoiceStatus.PAID,
                    or_(Invoice.amount == 0, Invoice.amount.is_(None)),
               )
               .all()
          )

          rent = Decimal(lease.monthly_rent or 0)
          for invoice in invoices:
               invoice.apply_rent(rent)

          if invoices:
               db.flush()
               logger.info("Back-filled rent %s on %d invoice(s) of lease %s", rent, len(invoices), lease.id)
          return len(invoices)

     @staticmethod
     def generate_monthly_invoices(db: Session, today: Optional[date] = None) -> list[Invoice]:
          """
          Generate this month's invoices for Active leases.

          This is the entry point for the external monthly scheduler. Leases
          that already have an invoice for the month are skipped, so a failed
          run can simply be repeated.

          Returns:
               List of created Invoice objects
          """
          today = today or date.today()
          month = month_label(today)
          due_date = date(today.year, today.month, min(INVOICE_DUE_DAY, 28))

          active_leases = (
               db.query(Lease)
               .filter(
                    Lease.status == LeaseStatus.ACTIVE,
                    Lease.start_date <= today,
                    or_(Lease.end_date.is_(None), Lease.end_date >= today),
               )
               .order_by(Lease.id)
               .all()
          )

          created_invoices = []
          for lease in active_leases:
               if InvoiceService.find_invoice(db, lease.tenant_id, lease.unit_id, month) is not None:
                    logger.info("Invoice already exists for lease %s for %s. Skipping.", lease.id, month)
                    continue

               invoice = InvoiceService.ensure_invoice_for_month(
                    db=db,
                    tenant_id=lease.tenant_id,
                    unit_id=lease.unit_id,
                    month=month,
                    rent=lease.monthly_rent,
                    due_date=due_date,
                    lease_id=lease.id,
                    prefix=AUTO_INVOICE_PREFIX,
               )
               created_invoices.append(invoice)

          logger.info("Monthly invoice run for %s created %d invoice(s)", month, len(created_invoices))
          return created_invoices
