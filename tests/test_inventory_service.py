from decimal import Decimal

import pytest

from models import (
    Bedroom,
    BedroomStatus,
    Invoice,
    Lease,
    Property,
    RentalMode,
    Transaction,
    Unit,
    UnitStatus,
)
from services.exceptions import LeaseValidationError, NotFoundError, UnitInUseError
from services.inventory_service import InventoryService
from services.lease_service import LeaseService


def test_create_unit_defaults(db, make_property):
    prop = make_property()

    bedroom_wise = InventoryService.create_unit(db, prop.id, "201", rental_mode=RentalMode.BEDROOM_WISE)
    full = InventoryService.create_unit(db, prop.id, "202")

    assert bedroom_wise.status == UnitStatus.VACANT
    assert [b.bedroom_number for b in bedroom_wise.bedrooms] == ["201-1", "201-2", "201-3"]
    assert [b.room_number for b in bedroom_wise.bedrooms] == [1, 2, 3]
    assert all(b.status == BedroomStatus.VACANT for b in bedroom_wise.bedrooms)
    assert full.bedroom_count == 1
    assert full.rental_mode == RentalMode.FULL_UNIT


def test_create_unit_with_identifiers(db, make_property):
    prop = make_property()
    unit = InventoryService.create_unit(
        db, prop.id, "301", rental_mode=RentalMode.BEDROOM_WISE, bedroom_identifiers=["A", "B"]
    )
    assert [b.bedroom_number for b in unit.bedrooms] == ["A", "B"]
    assert unit.bedroom_count == 2

    with pytest.raises(LeaseValidationError):
        InventoryService.create_unit(db, prop.id, "302", bedroom_count=3, bedroom_identifiers=["A"])


def test_create_unit_requires_property(db):
    with pytest.raises(NotFoundError):
        InventoryService.create_unit(db, 404, "1")


def test_list_vacant_bedrooms(db, make_property, make_unit, make_tenant, activate):
    prop = make_property(name="Tower One")
    unit = make_unit(unit_number="5", property_id=prop.id)
    make_unit(unit_number="6", property_id=prop.id, rental_mode=RentalMode.FULL_UNIT, bedroom_count=2)
    activate(unit, make_tenant(), bedroom=unit.bedrooms[0])

    vacant = InventoryService.list_vacant_bedrooms(db, property_id=prop.id)

    assert [b["display_name"] for b in vacant] == ["Tower One-5-2", "Tower One-5-3"]


def test_unit_details(db, make_unit, make_tenant, activate):
    unit = make_unit()
    tenant = make_tenant(first_name="Jose")
    lease = activate(unit, tenant, bedroom=unit.bedrooms[0])

    details = InventoryService.get_unit_details(db, unit.id)

    assert details["status"] == "Occupied"
    assert details["bedrooms"][0]["tenant_name"] == "Jose Cruz"
    assert details["bedrooms"][1]["tenant_id"] is None
    assert [active.id for active in details["active_leases"]] == [lease.id]
    assert details["lease_history"] == []


def test_delete_unit_blocked_by_active_lease(db, make_unit, make_tenant, activate):
    unit = make_unit()
    activate(unit, make_tenant(), bedroom=unit.bedrooms[0])

    with pytest.raises(UnitInUseError):
        InventoryService.delete_unit(db, unit.id)
    assert db.query(Unit).filter(Unit.id == unit.id).first() is not None


def test_delete_unit_removes_children(db, make_unit, make_tenant, activate):
    unit = make_unit()
    tenant = make_tenant()
    lease = activate(unit, tenant, bedroom=unit.bedrooms[0], deposit=Decimal("1000"))
    LeaseService.delete_lease(db, lease.id)
    other = make_tenant()
    LeaseService.create_lease(db, unit_id=unit.id, tenant_id=other.id, bedroom_id=unit.bedrooms[1].id)
    unit_id = unit.id

    result = InventoryService.delete_unit(db, unit_id)

    assert result["bedrooms"] == 3
    assert result["leases"] == 1
    assert result["invoices"] == 1
    assert db.query(Unit).filter(Unit.id == unit_id).first() is None
    assert db.query(Bedroom).filter(Bedroom.unit_id == unit_id).count() == 0
    assert db.query(Lease).count() == 0
    assert db.query(Invoice).count() == 0
    assert db.query(Transaction).count() == 1
    assert (other.unit_id, other.bedroom_id, other.building_id) == (None, None, None)


def test_delete_property_cascades(db, make_property, make_unit, make_tenant):
    prop = make_property()
    unit_a = make_unit(unit_number="A", property_id=prop.id)
    make_unit(unit_number="B", property_id=prop.id, rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    tenant = make_tenant()
    LeaseService.create_lease(db, unit_id=unit_a.id, tenant_id=tenant.id)
    prop_id = prop.id

    result = InventoryService.delete_property(db, prop_id)

    assert result["units"] == 2
    assert result["bedrooms"] == 4
    assert result["leases"] == 1
    assert db.query(Property).filter(Property.id == prop_id).first() is None
    assert db.query(Unit).count() == 0
    assert tenant.building_id is None
