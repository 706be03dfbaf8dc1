# services/lease_service.py
"""
Lease Service - lease lifecycle operations.

Each public method is one logical operation. It locks the affected unit and
bedrooms, validates against current occupancy, writes lease, unit, bedroom,
tenant cache, invoice and ledger rows, and flushes. Nothing here commits: the
session scope (database.get_session / get_session_context) commits on success
and rolls the whole operation back on any exception.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models import Invoice, Lease, LeaseStatus, RentalMode, Transaction, Unit, User
from .exceptions import LeaseValidationError, NotFoundError
from .invoice_service import InvoiceService
from .lease_state import CURRENT_STATUSES, LeaseAction, next_status
from .ledger_service import record_security_deposit
from .occupancy_service import (
     flush_occupancy,
     load_scope,
     occupy,
     release_lease,
     resolve_bedroom_id,
     validate_scope,
)
from .tenant_cache import get_tenant, refresh_tenant_cache

logger = logging.getLogger(__name__)


def _non_negative(value, field_name: str) -> Optional[Decimal]:
     if value is None:
          return None
     amount = Decimal(str(value))
     if amount < 0:
          raise LeaseValidationError(f"{field_name} cannot be negative")
     return amount


class LeaseService:
     """Service class for lease lifecycle business logic."""

     @staticmethod
     def get_lease(db: Session, lease_id: int) -> Lease:
          lease = db.query(Lease).filter(Lease.id == lease_id).first()
          if lease is None:
               raise NotFoundError("Lease", lease_id)
          return lease

     @staticmethod
     def create_lease(
          db: Session,
          unit_id: int,
          tenant_id: int,
          bedroom_id: Optional[int] = None,
          start_date: Optional[date] = None,
          end_date: Optional[date] = None,
          monthly_rent: Optional[Decimal] = None,
          security_deposit: Optional[Decimal] = None,
     ) -> Lease:
          """
          Create a lease, or finalize the tenant's DRAFT reservation on the unit.

          With a start date and monthly rent the lease becomes Active at once:
          occupancy is applied, the first invoice is issued and a non-zero
          security deposit is booked as a Liability. Without them the lease is
          (or stays) a DRAFT reservation and occupancy is untouched.

          Raises:
               LeaseValidationError: missing ids, bad dates or amounts.
               NotFoundError: unknown tenant, unit or bedroom.
               OccupancyConflictError: the unit or bedroom is taken or reserved.
          """
          if not unit_id or not tenant_id:
               raise LeaseValidationError("Unit ID and Tenant ID are required")
          if start_date and end_date and end_date < start_date:
               raise LeaseValidationError("End date cannot be before start date")
          monthly_rent = _non_negative(monthly_rent, "Monthly rent")
          security_deposit = _non_negative(security_deposit, "Security deposit")
          activate_now = start_date is not None and monthly_rent is not None

          tenant = get_tenant(db, tenant_id)

          draft = (
               db.query(Lease)
               .filter(
                    Lease.unit_id == unit_id,
                    Lease.tenant_id == tenant_id,
                    Lease.status == LeaseStatus.DRAFT,
               )
               .order_by(Lease.id.desc())
               .first()
          )
          if bedroom_id is None and draft is not None:
               bedroom_id = draft.bedroom_id

          scope = load_scope(db, unit_id, bedroom_id)
          validate_scope(db, scope, tenant_id, exclude_lease_ids=[draft.id] if draft else [])

          if draft is not None:
               lease = draft
               lease.bedroom_id = bedroom_id
          else:
               lease = Lease(
                    unit_id=unit_id,
                    tenant_id=tenant_id,
                    bedroom_id=bedroom_id,
                    status=LeaseStatus.DRAFT,
               )
               db.add(lease)

          if monthly_rent is not None:
               lease.monthly_rent = monthly_rent
          if security_deposit is not None:
               lease.security_deposit = security_deposit

          if not activate_now:
               db.flush()
               refresh_tenant_cache(db, tenant)
               logger.info(
                    "Lease %s reserved as DRAFT: tenant=%s unit=%s bedroom=%s",
                    lease.id, tenant_id, unit_id, bedroom_id
               )
               return lease

          if draft is not None:
               lease.status = next_status(lease.id, lease.status, LeaseAction.ACTIVATE)
          else:
               lease.status = LeaseStatus.ACTIVE
          lease.start_date = start_date
          lease.end_date = end_date

          occupy(scope)
          flush_occupancy(db, scope)

          InvoiceService.create_initial_lease_invoice(db, lease)
          record_security_deposit(db, lease, lease.security_deposit)
          refresh_tenant_cache(db, tenant)

          logger.info(
               "Lease %s Active: tenant=%s %s, unit status %s",
               lease.id, tenant_id, scope.label, scope.unit.status.value
          )
          return lease

     @staticmethod
     def activate_lease(db: Session, lease_id: int) -> Lease:
          """
          Turn a DRAFT reservation into an Active lease starting today.

          A deposit recorded on the draft is booked as a Liability now.

          Raises:
               NotFoundError: unknown lease.
               InvalidTransitionError: the lease is not a DRAFT.
               OccupancyConflictError: the unit or bedroom is no longer free.
          """
          lease = LeaseService.get_lease(db, lease_id)
          new_status = next_status(lease.id, lease.status, LeaseAction.ACTIVATE)

          bedroom_id = resolve_bedroom_id(db, lease)
          scope = load_scope(db, lease.unit_id, bedroom_id)
          validate_scope(db, scope, lease.tenant_id, exclude_lease_ids=[lease.id])

          lease.bedroom_id = bedroom_id
          lease.status = new_status
          lease.start_date = date.today()
          if lease.end_date is not None and lease.end_date < lease.start_date:
               lease.end_date = None
          if lease.monthly_rent is None:
               lease.monthly_rent = Decimal("0")

          occupy(scope)
          flush_occupancy(db, scope)

          InvoiceService.create_initial_lease_invoice(db, lease)
          record_security_deposit(db, lease, lease.security_deposit)
          refresh_tenant_cache(db, get_tenant(db, lease.tenant_id))

          logger.info(
               "Lease %s activated: tenant=%s %s, unit status %s",
               lease.id, lease.tenant_id, scope.label, scope.unit.status.value
          )
          return lease

     @staticmethod
     def update_lease_rent(db: Session, lease_id: int, monthly_rent: Decimal) -> Lease:
          """
          Correct a lease's monthly rent and reprice its unpaid zero-amount invoices.

          No status change.
          """
          rent = _non_negative(monthly_rent, "Monthly rent")
          if rent is None:
               raise LeaseValidationError("Monthly rent is required")

          lease = LeaseService.get_lease(db, lease_id)
          next_status(lease.id, lease.status, LeaseAction.UPDATE_RENT)

          lease.monthly_rent = rent
          db.flush()
          updated = InvoiceService.backfill_lease_rent(db, lease)

          logger.info("Lease %s rent -> %s (%d invoice(s) back-filled)", lease.id, rent, updated)
          return lease

     @staticmethod
     def delete_lease(db: Session, lease_id: int) -> dict:
          """
          Delete a lease.

          An Active lease is fully unwound first: its bedroom (or every bedroom
          of the unit for a full-unit lease) goes back to Vacant and the unit
          status is recomputed. Invoices and ledger rows are kept for billing
          history with their lease reference cleared. The tenant cache is
          recomputed from the remaining leases.
          """
          lease = LeaseService.get_lease(db, lease_id)
          next_status(lease.id, lease.status, LeaseAction.DELETE)
          was_active = lease.status == LeaseStatus.ACTIVE
          tenant_id = lease.tenant_id

          if was_active:
               release_lease(db, lease)

          db.query(Invoice).filter(Invoice.lease_id == lease.id).update(
               {Invoice.lease_id: None}, synchronize_session="fetch"
          )
          db.query(Transaction).filter(Transaction.lease_id == lease.id).update(
               {Transaction.lease_id: None}, synchronize_session="fetch"
          )
          db.delete(lease)
          db.flush()

          tenant = db.query(User).filter(User.id == tenant_id).first()
          if tenant is not None:
               refresh_tenant_cache(db, tenant)

          logger.info("Lease %s deleted (was %s)", lease_id, "Active" if was_active else "not active")
          return {"message": "Lease deleted", "lease_id": lease_id, "unwound": was_active}

     # ------------------------------------------------------------------
     # Read helpers
     # ------------------------------------------------------------------

     @staticmethod
     def get_lease_history(db: Session) -> list[dict]:
          """Leases with both dates set, newest start first."""
          leases = (
               db.query(Lease)
               .filter(Lease.start_date.isnot(None), Lease.end_date.isnot(None))
               .order_by(Lease.start_date.desc(), Lease.id.desc())
               .all()
          )

          history = []
          for lease in leases:
               unit = lease.unit
               history.append({
                    "id": lease.id,
                    "unit": unit.unit_number,
                    "type": unit.rental_mode.value,
                    "scope": "Per Bedroom" if unit.rental_mode == RentalMode.BEDROOM_WISE else "Monthly",
                    "tenant": lease.tenant.name,
                    "term": f"{lease.start_date:%Y-%m} - {lease.end_date:%Y-%m}",
                    "status": lease.status.value.lower(),
                    "start_date": lease.start_date,
                    "end_date": lease.end_date,
                    "monthly_rent": lease.monthly_rent or Decimal("0"),
               })
          return history

     @staticmethod
     def get_current_lease_for_unit(db: Session, unit_id: int) -> Optional[dict]:
          """Tenant holding the unit: Active lease first, else a DRAFT reservation."""
          for status in CURRENT_STATUSES:
               lease = (
                    db.query(Lease)
                    .filter(Lease.unit_id == unit_id, Lease.status == status)
                    .order_by(Lease.id.desc())
                    .first()
               )
               if lease is not None:
                    return {
                         "lease_id": lease.id,
                         "status": lease.status.value,
                         "tenant_id": lease.tenant_id,
                         "tenant_name": lease.tenant.name,
                         "bedroom_id": lease.bedroom_id,
                    }
          return None

     @staticmethod
     def get_units_with_tenants(db: Session, property_id: int, rental_mode: RentalMode) -> list[dict]:
          """Units of a property, in one rental mode, that carry a DRAFT or Active lease."""
          units = (
               db.query(Unit)
               .filter(Unit.property_id == property_id, Unit.rental_mode == rental_mode)
               .order_by(Unit.id)
               .all()
          )

          result = []
          for unit in units:
               current = LeaseService.get_current_lease_for_unit(db, unit.id)
               if current is None:
                    continue
               result.append({
                    "id": unit.id,
                    "unit_number": unit.unit_number,
                    "tenant_id": current["tenant_id"],
                    "tenant_name": current["tenant_name"],
               })
          return result
