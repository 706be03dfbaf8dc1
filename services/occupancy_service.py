# services/occupancy_service.py
"""
Occupancy synchronizer.

The only code allowed to write Unit.status, Unit.rental_mode and
Bedroom.status. Lease operations use it in three steps, all inside the
caller's transaction:

1. load_scope()      - lock the unit row and its bedroom rows (FOR UPDATE)
2. validate_scope()  - reject conflicting leases with a readable reason
3. occupy() / release() - write the consistent unit and bedroom statuses

Status derivation for a BEDROOM_WISE unit:
     every bedroom Occupied  -> Fully Booked
     every bedroom Vacant    -> Vacant
     anything in between     -> Occupied
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import (
     Bedroom,
     BedroomStatus,
     Lease,
     LeaseStatus,
     RentalMode,
     Unit,
     UnitStatus,
     User,
)
from .exceptions import (
     LeaseValidationError,
     NotFoundError,
     OccupancyConflictError,
)

logger = logging.getLogger(__name__)


@dataclass
class Scope:
     """A locked unit, its bedrooms, and the bedroom being leased (None = whole unit)."""
     unit: Unit
     bedrooms: List[Bedroom] = field(default_factory=list)
     bedroom: Optional[Bedroom] = None

     @property
     def is_full_unit(self) -> bool:
          return self.bedroom is None

     @property
     def label(self) -> str:
          if self.bedroom is not None:
               return f"bedroom {self.bedroom.bedroom_number} of unit {self.unit.unit_number}"
          return f"unit {self.unit.unit_number}"


# ---------------------------------------------------------------------------
# Loading and locking
# ---------------------------------------------------------------------------

def lock_unit(db: Session, unit_id: int) -> Unit:
     unit = db.query(Unit).filter(Unit.id == unit_id).with_for_update().first()
     if unit is None:
          raise NotFoundError("Unit", unit_id)
     return unit


def lock_bedrooms(db: Session, unit_id: int) -> List[Bedroom]:
     return (
          db.query(Bedroom)
          .filter(Bedroom.unit_id == unit_id)
          .order_by(Bedroom.room_number)
          .with_for_update()
          .all()
     )


def load_scope(db: Session, unit_id: int, bedroom_id: Optional[int] = None) -> Scope:
     """
     Lock the unit and all of its bedrooms, and resolve the target bedroom.

     Raises:
          NotFoundError: unknown unit or bedroom.
          LeaseValidationError: the bedroom belongs to another unit.
     """
     unit = lock_unit(db, unit_id)
     bedrooms = lock_bedrooms(db, unit_id)
     scope = Scope(unit=unit, bedrooms=bedrooms)

     if bedroom_id is not None:
          scope.bedroom = next((b for b in bedrooms if b.id == bedroom_id), None)
          if scope.bedroom is None:
               exists = db.query(Bedroom.id).filter(Bedroom.id == bedroom_id).first()
               if exists is None:
                    raise NotFoundError("Bedroom", bedroom_id)
               raise LeaseValidationError(
                    f"Bedroom {bedroom_id} does not belong to unit {unit.unit_number}"
               )
     return scope


def resolve_bedroom_id(db: Session, lease: Lease) -> Optional[int]:
     """
     Work out which bedroom a lease covers.

     Older leases may carry no bedroom_id while the tenant record points at a
     bedroom of the same unit; that bedroom is then the lease's scope.
     """
     if lease.bedroom_id is not None:
          return lease.bedroom_id

     tenant = db.query(User).filter(User.id == lease.tenant_id).first()
     if tenant is None or tenant.bedroom_id is None:
          return None

     bedroom = db.query(Bedroom).filter(Bedroom.id == tenant.bedroom_id).first()
     if bedroom is not None and bedroom.unit_id == lease.unit_id:
          return bedroom.id
     return None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def derive_unit_status(bedrooms: Iterable[Bedroom]) -> Optional[UnitStatus]:
     """Unit status implied by its bedrooms, or None for a unit without bedrooms."""
     statuses = [b.status for b in bedrooms]
     if not statuses:
          return None
     if all(s == BedroomStatus.OCCUPIED for s in statuses):
          return UnitStatus.FULLY_BOOKED
     if all(s == BedroomStatus.VACANT for s in statuses):
          return UnitStatus.VACANT
     return UnitStatus.OCCUPIED


def _lease_query(db: Session, status: LeaseStatus, exclude_lease_ids: Iterable[int]):
     query = db.query(Lease).filter(Lease.status == status)
     exclude = [lease_id for lease_id in exclude_lease_ids if lease_id is not None]
     if exclude:
          query = query.filter(Lease.id.notin_(exclude))
     return query


def _describe(db: Session, lease: Lease) -> str:
     tenant = db.query(User).filter(User.id == lease.tenant_id).first()
     name = tenant.name if tenant and tenant.name else f"tenant #{lease.tenant_id}"
     return f"lease #{lease.id}, {name}"


def _conflict(message: str, scope: str, lease: Optional[Lease] = None) -> OccupancyConflictError:
     logger.warning("Occupancy conflict: %s", message)
     return OccupancyConflictError(message, scope=scope, conflicting_lease_id=lease.id if lease else None)


def validate_scope(
     db: Session,
     scope: Scope,
     tenant_id: int,
     exclude_lease_ids: Iterable[int] = (),
     ignore_bedroom_ids: Iterable[int] = (),
) -> None:
     """
     Check that ``tenant_id`` may lease ``scope``.

     ``exclude_lease_ids`` are the caller's own leases (the DRAFT being
     activated, or the lease a tenant is moving out of). ``ignore_bedroom_ids``
     are bedrooms that are Occupied only because of such an excluded lease.

     Raises:
          OccupancyConflictError: with the reason the lease cannot be granted.
     """
     exclude = list(exclude_lease_ids)
     ignored = set(ignore_bedroom_ids)
     unit = scope.unit

     if scope.is_full_unit:
          occupied = [
               b for b in scope.bedrooms
               if b.status == BedroomStatus.OCCUPIED and b.id not in ignored
          ]
          if occupied:
               labels = ", ".join(b.bedroom_number for b in occupied)
               raise _conflict(
                    f"Cannot lease unit {unit.unit_number} as a full unit: "
                    f"{len(occupied)} bedroom(s) already occupied. Occupied bedrooms: {labels}.",
                    scope="unit",
               )

          active = _lease_query(db, LeaseStatus.ACTIVE, exclude).filter(Lease.unit_id == unit.id).first()
          if active is not None:
               raise _conflict(
                    f"Unit {unit.unit_number} already has an active lease ({_describe(db, active)}).",
                    scope="unit",
                    lease=active,
               )

          draft = (
               _lease_query(db, LeaseStatus.DRAFT, exclude)
               .filter(Lease.unit_id == unit.id, Lease.tenant_id != tenant_id)
               .first()
          )
          if draft is not None:
               raise _conflict(
                    f"Unit {unit.unit_number} is reserved for another tenant ({_describe(db, draft)}).",
                    scope="unit",
                    lease=draft,
               )
          return

     bedroom = scope.bedroom

     full_unit_active = (
          _lease_query(db, LeaseStatus.ACTIVE, exclude)
          .filter(Lease.unit_id == unit.id, Lease.bedroom_id.is_(None))
          .first()
     )
     if full_unit_active is not None:
          raise _conflict(
               f"Unit {unit.unit_number} is leased as a full unit ({_describe(db, full_unit_active)}); "
               f"bedroom {bedroom.bedroom_number} cannot be leased separately.",
               scope="unit",
               lease=full_unit_active,
          )

     full_unit_draft = (
          _lease_query(db, LeaseStatus.DRAFT, exclude)
          .filter(
               Lease.unit_id == unit.id,
               Lease.bedroom_id.is_(None),
               Lease.tenant_id != tenant_id,
          )
          .first()
     )
     if full_unit_draft is not None:
          raise _conflict(
               f"Unit {unit.unit_number} is reserved as a full unit for another tenant "
               f"({_describe(db, full_unit_draft)}).",
               scope="unit",
               lease=full_unit_draft,
          )

     holder = (
          _lease_query(db, LeaseStatus.ACTIVE, exclude)
          .filter(Lease.bedroom_id == bedroom.id)
          .first()
     )
     if holder is not None:
          raise _conflict(
               f"Bedroom {bedroom.bedroom_number} is already occupied ({_describe(db, holder)}).",
               scope="bedroom",
               lease=holder,
          )

     if bedroom.status != BedroomStatus.VACANT and bedroom.id not in ignored:
          raise _conflict(
               f"Bedroom {bedroom.bedroom_number} is not vacant (status: {bedroom.status.value}).",
               scope="bedroom",
          )

     bedroom_draft = (
          _lease_query(db, LeaseStatus.DRAFT, exclude)
          .filter(Lease.bedroom_id == bedroom.id, Lease.tenant_id != tenant_id)
          .first()
     )
     if bedroom_draft is not None:
          raise _conflict(
               f"Bedroom {bedroom.bedroom_number} is reserved for another tenant "
               f"({_describe(db, bedroom_draft)}).",
               scope="bedroom",
               lease=bedroom_draft,
          )


# ---------------------------------------------------------------------------
# Applying and releasing occupancy
# ---------------------------------------------------------------------------

def occupy(scope: Scope) -> None:
     """Mark the scope as taken by a newly Active lease."""
     unit = scope.unit
     if scope.is_full_unit:
          unit.status = UnitStatus.FULLY_BOOKED
          unit.rental_mode = RentalMode.FULL_UNIT
          # Bedrooms follow the unit so a later switch to BEDROOM_WISE sees them taken
          for bedroom in scope.bedrooms:
               bedroom.status = BedroomStatus.OCCUPIED
          return

     scope.bedroom.status = BedroomStatus.OCCUPIED
     unit.rental_mode = RentalMode.BEDROOM_WISE
     if derive_unit_status(scope.bedrooms) == UnitStatus.FULLY_BOOKED:
          unit.status = UnitStatus.FULLY_BOOKED
     else:
          unit.status = UnitStatus.OCCUPIED


def release(scope: Scope) -> None:
     """Give the scope back after its Active lease ended."""
     unit = scope.unit
     if scope.is_full_unit:
          for bedroom in scope.bedrooms:
               bedroom.status = BedroomStatus.VACANT
          unit.status = UnitStatus.VACANT
          return

     scope.bedroom.status = BedroomStatus.VACANT
     derived = derive_unit_status(scope.bedrooms)
     if derived == UnitStatus.VACANT:
          unit.status = UnitStatus.VACANT
     elif derived is not None:
          unit.status = UnitStatus.OCCUPIED


def release_lease(db: Session, lease: Lease) -> Scope:
     """Lock and release whatever an Active lease was holding."""
     scope = load_scope(db, lease.unit_id, resolve_bedroom_id(db, lease))
     release(scope)
     logger.info(
          "Released %s held by lease %s (unit status now %s)",
          scope.label, lease.id, scope.unit.status.value
     )
     return scope


def held_bedroom_ids(scope: Scope, lease: Lease) -> List[int]:
     """Bedrooms of ``scope.unit`` that are Occupied because of ``lease``."""
     if lease.status != LeaseStatus.ACTIVE or lease.unit_id != scope.unit.id:
          return []
     if lease.bedroom_id is None:
          return [b.id for b in scope.bedrooms]
     return [lease.bedroom_id]


def flush_occupancy(db: Session, scope: Scope) -> None:
     """
     Flush occupancy writes, turning a unique-index violation into a conflict.

     The partial unique indexes on leases catch the case where another
     transaction took the same unit or bedroom between our read and write.
     """
     try:
          db.flush()
     except IntegrityError as exc:
          label = scope.label
          raise OccupancyConflictError(
               f"{label[0].upper()}{label[1:]} was leased by a concurrent request; please retry.",
               scope="unit" if scope.is_full_unit else "bedroom",
          ) from exc


# ---------------------------------------------------------------------------
# Rental mode
# ---------------------------------------------------------------------------

def change_rental_mode(db: Session, unit_id: int, rental_mode: RentalMode) -> Unit:
     """
     Switch a unit between FULL_UNIT and BEDROOM_WISE.

     BEDROOM_WISE needs bedrooms and no Active full-unit lease; FULL_UNIT
     needs no Active bedroom leases.
     """
     scope = load_scope(db, unit_id)
     unit = scope.unit
     if unit.rental_mode == rental_mode:
          return unit

     if rental_mode == RentalMode.BEDROOM_WISE:
          if not scope.bedrooms:
               raise LeaseValidationError(
                    f"Unit {unit.unit_number} has no bedrooms and cannot be rented bedroom-wise"
               )
          full_unit = (
               db.query(Lease)
               .filter(
                    Lease.unit_id == unit.id,
                    Lease.bedroom_id.is_(None),
                    Lease.status == LeaseStatus.ACTIVE,
               )
               .first()
          )
          if full_unit is not None:
               raise _conflict(
                    f"Unit {unit.unit_number} is leased as a full unit ({_describe(db, full_unit)}).",
                    scope="unit",
                    lease=full_unit,
               )
     else:
          bedroom_leases = (
               db.query(Lease)
               .filter(
                    Lease.unit_id == unit.id,
                    Lease.bedroom_id.isnot(None),
                    Lease.status == LeaseStatus.ACTIVE,
               )
               .order_by(Lease.id)
               .all()
          )
          if bedroom_leases:
               ids = ", ".join(f"#{lease.id}" for lease in bedroom_leases)
               raise _conflict(
                    f"Unit {unit.unit_number} has {len(bedroom_leases)} active bedroom lease(s) "
                    f"({ids}) and cannot be rented as a full unit.",
                    scope="bedroom",
                    lease=bedroom_leases[0],
               )

     unit.rental_mode = rental_mode
     db.flush()
     logger.info("Unit %s rental mode -> %s", unit.id, rental_mode.value)
     return unit
