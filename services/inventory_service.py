# services/inventory_service.py
"""
Inventory Service - properties, units and bedrooms.

Creation puts every unit and bedroom in Vacant; from then on only the
occupancy synchronizer changes their status. Deletion never relies on a
database cascade: the unit's invoices, leases and bedrooms are removed
explicitly, ledger rows keep their history with references cleared, and every
affected tenant's occupancy cache is recomputed.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from models import (
     Bedroom,
     BedroomStatus,
     Invoice,
     Lease,
     LeaseStatus,
     Property,
     RentalMode,
     Transaction,
     Unit,
     UnitStatus,
     User,
)
from .exceptions import LeaseValidationError, NotFoundError, UnitInUseError
from .occupancy_service import lock_unit
from .tenant_cache import refresh_tenant_caches

logger = logging.getLogger(__name__)

DEFAULT_BEDROOM_WISE_BEDROOMS = 3


class InventoryService:
     """Service class for property/unit/bedroom inventory."""

     @staticmethod
     def create_property(
          db: Session,
          name: str,
          street: Optional[str] = None,
          city: Optional[str] = None,
          state: Optional[str] = None,
          postal_code: Optional[str] = None,
          country: Optional[str] = None,
     ) -> Property:
          if not name or not name.strip():
               raise LeaseValidationError("Property name is required")

          prop = Property(
               name=name.strip(),
               street=street,
               city=city,
               state=state,
               postal_code=postal_code,
               country=country,
          )
          db.add(prop)
          db.flush()
          logger.info("Created property %s (%s)", prop.id, prop.name)
          return prop

     @staticmethod
     def get_property(db: Session, property_id: int) -> Property:
          prop = db.query(Property).filter(Property.id == property_id).first()
          if prop is None:
               raise NotFoundError("Property", property_id)
          return prop

     @staticmethod
     def create_unit(
          db: Session,
          property_id: int,
          unit_number: str,
          rental_mode: RentalMode = RentalMode.FULL_UNIT,
          bedroom_count: Optional[int] = None,
          bedroom_identifiers: Optional[List[str]] = None,
          unit_type: Optional[str] = None,
          floor: Optional[int] = None,
          rent_amount: Optional[Decimal] = None,
          bedroom_rent: Optional[Decimal] = None,
     ) -> Unit:
          """
          Create a Vacant unit and its Vacant bedrooms.

          Bedrooms are numbered 1..n in ``room_number``. Their identifiers come
          from ``bedroom_identifiers`` when given, else "<unit_number>-<i>".
          """
          InventoryService.get_property(db, property_id)
          if not unit_number:
               raise LeaseValidationError("Unit number is required")

          if bedroom_identifiers:
               if bedroom_count is not None and bedroom_count != len(bedroom_identifiers):
                    raise LeaseValidationError(
                         f"Got {len(bedroom_identifiers)} bedroom identifiers for {bedroom_count} bedroom(s)"
                    )
               bedroom_count = len(bedroom_identifiers)
          elif bedroom_count is None:
               bedroom_count = DEFAULT_BEDROOM_WISE_BEDROOMS if rental_mode == RentalMode.BEDROOM_WISE else 1

          if bedroom_count < 0:
               raise LeaseValidationError("Bedroom count cannot be negative")
          if rental_mode == RentalMode.BEDROOM_WISE and bedroom_count == 0:
               raise LeaseValidationError("A bedroom-wise unit needs at least one bedroom")

          unit = Unit(
               property_id=property_id,
               unit_number=unit_number,
               unit_type=unit_type,
               floor=floor,
               rental_mode=rental_mode,
               status=UnitStatus.VACANT,
               bedroom_count=bedroom_count,
               rent_amount=Decimal(str(rent_amount)) if rent_amount is not None else Decimal("0"),
          )
          db.add(unit)
          db.flush()

          for i in range(1, bedroom_count + 1):
               identifier = bedroom_identifiers[i - 1] if bedroom_identifiers else f"{unit_number}-{i}"
               db.add(Bedroom(
                    unit_id=unit.id,
                    bedroom_number=identifier,
                    room_number=i,
                    status=BedroomStatus.VACANT,
                    rent_amount=Decimal(str(bedroom_rent)) if bedroom_rent is not None else Decimal("0"),
               ))
          db.flush()

          logger.info(
               "Created unit %s (%s, %s) with %d bedroom(s)",
               unit.id, unit_number, rental_mode.value, bedroom_count
          )
          return unit

     @staticmethod
     def get_unit(db: Session, unit_id: int) -> Unit:
          unit = db.query(Unit).filter(Unit.id == unit_id).first()
          if unit is None:
               raise NotFoundError("Unit", unit_id)
          return unit

     @staticmethod
     def get_unit_details(db: Session, unit_id: int) -> dict:
          """Unit with its ordered bedrooms, Active leases and past leases."""
          unit = InventoryService.get_unit(db, unit_id)
          leases = (
               db.query(Lease)
               .filter(Lease.unit_id == unit.id)
               .order_by(Lease.id.desc())
               .all()
          )
          active = [lease for lease in leases if lease.status == LeaseStatus.ACTIVE]
          holders = {lease.bedroom_id: lease for lease in active if lease.bedroom_id is not None}

          bedrooms = []
          for bedroom in unit.bedrooms:
               holder = holders.get(bedroom.id)
               bedrooms.append({
                    "id": bedroom.id,
                    "bedroom_number": bedroom.bedroom_number,
                    "room_number": bedroom.room_number,
                    "status": bedroom.status.value,
                    "rent_amount": bedroom.rent_amount,
                    "tenant_id": holder.tenant_id if holder else None,
                    "tenant_name": holder.tenant.name if holder else None,
               })

          return {
               "id": unit.id,
               "property_id": unit.property_id,
               "property_name": unit.property.name,
               "unit_number": unit.unit_number,
               "unit_type": unit.unit_type,
               "floor": unit.floor,
               "rental_mode": unit.rental_mode.value,
               "status": unit.status.value,
               "bedroom_count": unit.bedroom_count,
               "rent_amount": unit.rent_amount,
               "bedrooms": bedrooms,
               "active_leases": active,
               "lease_history": [lease for lease in leases if lease.status != LeaseStatus.ACTIVE],
          }

     @staticmethod
     def list_vacant_bedrooms(
          db: Session,
          property_id: Optional[int] = None,
          unit_id: Optional[int] = None,
     ) -> list[dict]:
          """Vacant bedrooms of bedroom-wise units, named "<property>-<bedroom>"."""
          query = (
               db.query(Bedroom, Unit, Property)
               .join(Unit, Bedroom.unit_id == Unit.id)
               .join(Property, Unit.property_id == Property.id)
               .filter(
                    Bedroom.status == BedroomStatus.VACANT,
                    Unit.rental_mode == RentalMode.BEDROOM_WISE,
               )
          )
          if property_id is not None:
               query = query.filter(Property.id == property_id)
          if unit_id is not None:
               query = query.filter(Unit.id == unit_id)

          return [
               {
                    "id": bedroom.id,
                    "unit_id": unit.id,
                    "property_id": prop.id,
                    "bedroom_number": bedroom.bedroom_number,
                    "unit_number": unit.unit_number,
                    "display_name": f"{prop.name}-{bedroom.bedroom_number}",
                    "rent_amount": bedroom.rent_amount,
               }
               for bedroom, unit, prop in query.order_by(Unit.id, Bedroom.room_number).all()
          ]

     @staticmethod
     def delete_unit(db: Session, unit_id: int) -> dict:
          """
          Delete a unit with its bedrooms, leases and invoices.

          Raises:
               UnitInUseError: an Active lease still references the unit.
          """
          unit = lock_unit(db, unit_id)
          _ensure_no_active_lease(db, [unit])
          counts = _purge_unit(db, unit)
          db.flush()
          logger.info("Deleted unit %s: %s", unit_id, counts)
          return {"message": "Unit deleted", "unit_id": unit_id, **counts}

     @staticmethod
     def delete_property(db: Session, property_id: int) -> dict:
          """
          Delete a property and everything under it.

          Units, bedrooms, leases and invoices are removed explicitly, unit by
          unit. Blocked like delete_unit while any unit has an Active lease.
          """
          prop = InventoryService.get_property(db, property_id)
          units = db.query(Unit).filter(Unit.property_id == prop.id).order_by(Unit.id).with_for_update().all()
          _ensure_no_active_lease(db, units)

          totals = {"units": 0, "bedrooms": 0, "leases": 0, "invoices": 0}
          for unit in units:
               for key, value in _purge_unit(db, unit).items():
                    totals[key] += value
               totals["units"] += 1

          db.expire(prop, ["units"])
          db.delete(prop)
          db.flush()
          logger.info("Deleted property %s: %s", property_id, totals)
          return {"message": "Property deleted", "property_id": property_id, **totals}


def _ensure_no_active_lease(db: Session, units: List[Unit]) -> None:
     unit_ids = [unit.id for unit in units]
     if not unit_ids:
          return
     active = (
          db.query(Lease)
          .filter(Lease.unit_id.in_(unit_ids), Lease.status == LeaseStatus.ACTIVE)
          .order_by(Lease.id)
          .first()
     )
     if active is not None:
          unit = next(u for u in units if u.id == active.unit_id)
          raise UnitInUseError(
               f"Unit {unit.unit_number} has an active lease (lease #{active.id}); "
               f"delete or move the lease first"
          )


def _purge_unit(db: Session, unit: Unit) -> dict:
     """Remove one unit's invoices, leases and bedrooms, then the unit itself."""
     lease_ids = [row.id for row in db.query(Lease.id).filter(Lease.unit_id == unit.id)]
     bedroom_ids = [row.id for row in db.query(Bedroom.id).filter(Bedroom.unit_id == unit.id)]
     invoices = db.query(Invoice).filter(Invoice.unit_id == unit.id).all()
     invoice_ids = [invoice.id for invoice in invoices]

     tenant_ids = {row.tenant_id for row in db.query(Lease.tenant_id).filter(Lease.unit_id == unit.id)}
     tenant_ids.update(row.id for row in db.query(User.id).filter(User.unit_id == unit.id))

     # Ledger rows are history; they outlive the invoices and leases they cite
     if invoice_ids:
          db.query(Transaction).filter(Transaction.invoice_id.in_(invoice_ids)).update(
               {Transaction.invoice_id: None}, synchronize_session="fetch"
          )
     if lease_ids:
          db.query(Transaction).filter(Transaction.lease_id.in_(lease_ids)).update(
               {Transaction.lease_id: None}, synchronize_session="fetch"
          )

     for invoice in invoices:
          db.delete(invoice)
     db.flush()
     for lease in db.query(Lease).filter(Lease.unit_id == unit.id).all():
          db.expire(lease, ["invoices"])
          db.delete(lease)
     db.flush()

     refresh_tenant_caches(db, tenant_ids)

     for bedroom in db.query(Bedroom).filter(Bedroom.unit_id == unit.id).all():
          db.expire(bedroom, ["leases"])
          db.delete(bedroom)
     db.flush()

     db.expire(unit, ["bedrooms", "leases"])
     db.delete(unit)
     db.flush()

     return {"bedrooms": len(bedroom_ids), "leases": len(lease_ids), "invoices": len(invoice_ids)}
