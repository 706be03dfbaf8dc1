# services/reassignment_service.py
"""
Tenant-unit reassignment.

Moves a tenant to another unit or bedroom in one transaction:

* Active lease  -> old lease becomes MOVED (end date today), its unit and
  bedrooms are released, and an Active lease is opened at the target (the
  tenant's own DRAFT there is finalized rather than left behind).
* DRAFT lease   -> the reservation is repointed in place (no history row).
* no lease      -> a DRAFT reservation is created at the target.

The target is locked and validated before anything is written, so a rejected
move leaves both the old and the new location untouched.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models import Bedroom, Lease, LeaseStatus
from .exceptions import LeaseValidationError, NotFoundError
from .invoice_service import InvoiceService
from .lease_service import LeaseService
from .lease_state import LeaseAction, next_status
from .occupancy_service import (
     Scope,
     flush_occupancy,
     held_bedroom_ids,
     load_scope,
     occupy,
     release_lease,
     resolve_bedroom_id,
     validate_scope,
)
from .tenant_cache import current_lease_for_tenant, get_tenant, refresh_tenant_cache

logger = logging.getLogger(__name__)


def _target_unit_id(db: Session, new_unit_id: Optional[int], new_bedroom_id: Optional[int]) -> int:
     if new_bedroom_id is None:
          if not new_unit_id:
               raise LeaseValidationError("A unit or bedroom is required")
          return new_unit_id

     bedroom = db.query(Bedroom).filter(Bedroom.id == new_bedroom_id).first()
     if bedroom is None:
          raise NotFoundError("Bedroom", new_bedroom_id)
     if new_unit_id and new_unit_id != bedroom.unit_id:
          raise LeaseValidationError(
               f"Bedroom {bedroom.bedroom_number} does not belong to unit {new_unit_id}"
          )
     return bedroom.unit_id


def _rent_for(scope: Scope, fallback) -> Decimal:
     """Base rent of the new location, or the previous lease's rent when none is set."""
     base = scope.bedroom.rent_amount if scope.bedroom is not None else scope.unit.rent_amount
     if base is not None and Decimal(base) > 0:
          return Decimal(base)
     return Decimal(fallback or 0)


def update_tenant_assignment(
     db: Session,
     tenant_id: int,
     new_unit_id: Optional[int] = None,
     new_bedroom_id: Optional[int] = None,
) -> Lease:
     """
     Move a tenant to ``new_unit_id`` (optionally one bedroom of it).

     A tenant with no lease gets a DRAFT reservation, not an Active lease:
     activation goes through LeaseService so occupancy and billing stay in step.

     Returns:
          The tenant's lease at the new location.

     Raises:
          LeaseValidationError: no target given, or bedroom/unit mismatch.
          NotFoundError: unknown tenant, unit or bedroom.
          OccupancyConflictError: the target is taken or reserved.
     """
     tenant = get_tenant(db, tenant_id)
     unit_id = _target_unit_id(db, new_unit_id, new_bedroom_id)
     current = current_lease_for_tenant(db, tenant.id)

     if current is None:
          logger.info("Tenant %s has no lease; reserving unit %s", tenant.id, unit_id)
          return LeaseService.create_lease(db, unit_id=unit_id, tenant_id=tenant.id, bedroom_id=new_bedroom_id)

     if current.unit_id == unit_id and resolve_bedroom_id(db, current) == new_bedroom_id:
          logger.info("Tenant %s already assigned to lease %s; nothing to move", tenant.id, current.id)
          return current

     new_status = next_status(current.id, current.status, LeaseAction.RELOCATE)
     target = load_scope(db, unit_id, new_bedroom_id)

     if current.status == LeaseStatus.DRAFT:
          validate_scope(db, target, tenant.id, exclude_lease_ids=[current.id])
          current.unit_id = unit_id
          current.bedroom_id = new_bedroom_id
          db.flush()
          refresh_tenant_cache(db, tenant)
          logger.info("DRAFT lease %s repointed to %s", current.id, target.label)
          return current

     # Bedrooms of the target that are Occupied only by the lease being left
     # behind do not block the move.
     if current.bedroom_id is None and current.unit_id == unit_id:
          current.bedroom_id = resolve_bedroom_id(db, current)
     reservation = (
          db.query(Lease)
          .filter(
               Lease.unit_id == unit_id,
               Lease.tenant_id == tenant.id,
               Lease.status == LeaseStatus.DRAFT,
          )
          .order_by(Lease.id.desc())
          .first()
     )
     excluded = [current.id] + ([reservation.id] if reservation is not None else [])
     validate_scope(
          db,
          target,
          tenant.id,
          exclude_lease_ids=excluded,
          ignore_bedroom_ids=held_bedroom_ids(target, current),
     )

     release_lease(db, current)
     current.status = new_status
     current.end_date = date.today()
     db.flush()

     # The tenant's own reservation on the target becomes the new lease.
     if reservation is not None:
          moved_to = reservation
          moved_to.status = next_status(reservation.id, reservation.status, LeaseAction.ACTIVATE)
     else:
          moved_to = Lease(unit_id=unit_id, tenant_id=tenant.id, status=LeaseStatus.ACTIVE)
          db.add(moved_to)
     moved_to.bedroom_id = new_bedroom_id
     moved_to.start_date = date.today()
     moved_to.end_date = None
     moved_to.monthly_rent = _rent_for(target, current.monthly_rent)
     moved_to.security_deposit = current.security_deposit

     occupy(target)
     flush_occupancy(db, target)

     InvoiceService.create_initial_lease_invoice(db, moved_to)
     refresh_tenant_cache(db, tenant)

     logger.info(
          "Tenant %s moved: lease %s -> MOVED, lease %s Active on %s",
          tenant.id, current.id, moved_to.id, target.label
     )
     return moved_to
