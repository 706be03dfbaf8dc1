from datetime import date
from decimal import Decimal

import pytest

from models import (
    Bedroom,
    BedroomStatus,
    Lease,
    LeaseStatus,
    RentalMode,
    UnitStatus,
)
from services.exceptions import LeaseValidationError, OccupancyConflictError
from services.lease_service import LeaseService
from services.occupancy_service import (
    change_rental_mode,
    derive_unit_status,
    flush_occupancy,
    load_scope,
)


def _bedrooms(*statuses):
    return [Bedroom(bedroom_number=f"B{i}", room_number=i, status=s) for i, s in enumerate(statuses, 1)]


def test_derive_unit_status():
    assert derive_unit_status(_bedrooms(BedroomStatus.OCCUPIED, BedroomStatus.OCCUPIED)) == UnitStatus.FULLY_BOOKED
    assert derive_unit_status(_bedrooms(BedroomStatus.VACANT, BedroomStatus.VACANT)) == UnitStatus.VACANT
    assert derive_unit_status(_bedrooms(BedroomStatus.OCCUPIED, BedroomStatus.VACANT)) == UnitStatus.OCCUPIED
    assert derive_unit_status([]) is None


def test_bedroom_leases_fill_the_unit(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=3)
    b1, b2, b3 = unit.bedrooms

    activate(unit, make_tenant(), bedroom=b1)
    assert b1.status == BedroomStatus.OCCUPIED
    assert unit.status == UnitStatus.OCCUPIED
    assert unit.rental_mode == RentalMode.BEDROOM_WISE

    activate(unit, make_tenant(), bedroom=b2)
    assert unit.status == UnitStatus.OCCUPIED

    activate(unit, make_tenant(), bedroom=b3)
    assert unit.status == UnitStatus.FULLY_BOOKED
    assert all(b.status == BedroomStatus.OCCUPIED for b in unit.bedrooms)


def test_full_unit_blocked_by_occupied_bedroom(db, make_unit, make_tenant, activate):
    unit = make_unit()
    activate(unit, make_tenant(), bedroom=unit.bedrooms[0])

    with pytest.raises(OccupancyConflictError) as exc_info:
        LeaseService.create_lease(db, unit_id=unit.id, tenant_id=make_tenant().id)

    assert "1 bedroom(s) already occupied" in str(exc_info.value)
    assert unit.bedrooms[0].bedroom_number in str(exc_info.value)
    assert exc_info.value.scope == "unit"


def test_second_full_unit_lease_rejected(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    first = activate(unit, make_tenant())
    assert unit.status == UnitStatus.FULLY_BOOKED

    with pytest.raises(OccupancyConflictError):
        activate(unit, make_tenant())

    active = db.query(Lease).filter(Lease.unit_id == unit.id, Lease.status == LeaseStatus.ACTIVE).all()
    assert [lease.id for lease in active] == [first.id]


def test_full_unit_without_bedrooms_rejects_second_lease(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=0)
    first = activate(unit, make_tenant())

    with pytest.raises(OccupancyConflictError) as exc_info:
        activate(unit, make_tenant())
    assert exc_info.value.conflicting_lease_id == first.id


def test_bedroom_already_taken(db, make_unit, make_tenant, activate):
    unit = make_unit()
    bedroom = unit.bedrooms[1]
    activate(unit, make_tenant(), bedroom=bedroom)

    with pytest.raises(OccupancyConflictError) as exc_info:
        activate(unit, make_tenant(), bedroom=bedroom)
    assert exc_info.value.scope == "bedroom"


def test_bedroom_blocked_by_full_unit_lease(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=2)
    activate(unit, make_tenant())

    with pytest.raises(OccupancyConflictError) as exc_info:
        activate(unit, make_tenant(), bedroom=unit.bedrooms[0])
    assert exc_info.value.scope == "unit"


def test_bedroom_of_other_unit_rejected(db, make_unit, make_tenant):
    unit_a = make_unit(unit_number="101")
    unit_b = make_unit(unit_number="102")

    with pytest.raises(LeaseValidationError):
        load_scope(db, unit_a.id, unit_b.bedrooms[0].id)


def test_unique_index_violation_becomes_conflict(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=0)
    activate(unit, make_tenant())

    scope = load_scope(db, unit.id)
    db.add(Lease(
        unit_id=unit.id,
        tenant_id=make_tenant().id,
        status=LeaseStatus.ACTIVE,
        start_date=date.today(),
        monthly_rent=Decimal("1"),
    ))
    with pytest.raises(OccupancyConflictError) as exc_info:
        flush_occupancy(db, scope)
    assert "concurrent" in str(exc_info.value)


def test_change_rental_mode(db, make_unit):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=2)
    change_rental_mode(db, unit.id, RentalMode.BEDROOM_WISE)
    assert unit.rental_mode == RentalMode.BEDROOM_WISE


def test_bedroom_wise_needs_bedrooms(db, make_unit):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=0)
    with pytest.raises(LeaseValidationError):
        change_rental_mode(db, unit.id, RentalMode.BEDROOM_WISE)


def test_full_unit_mode_blocked_by_bedroom_lease(db, make_unit, make_tenant, activate):
    unit = make_unit()
    activate(unit, make_tenant(), bedroom=unit.bedrooms[0])

    with pytest.raises(OccupancyConflictError):
        change_rental_mode(db, unit.id, RentalMode.FULL_UNIT)
    assert unit.rental_mode == RentalMode.BEDROOM_WISE
