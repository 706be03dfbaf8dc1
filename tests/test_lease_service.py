from datetime import date, timedelta
from decimal import Decimal

import pytest

from models import (
    BedroomStatus,
    Invoice,
    InvoiceStatus,
    Lease,
    LeaseStatus,
    RentalMode,
    Transaction,
    TransactionType,
    UnitStatus,
    UserRole,
    User,
)
from services.exceptions import (
    InvalidTransitionError,
    LeaseValidationError,
    NotFoundError,
    OccupancyConflictError,
)
from services.invoice_service import month_label
from services.lease_service import LeaseService
from services.ledger_service import record_security_deposit


def test_create_active_lease_issues_first_invoice(db, make_unit, make_tenant):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    tenant = make_tenant()
    start = date(2026, 11, 1)

    lease = LeaseService.create_lease(
        db,
        unit_id=unit.id,
        tenant_id=tenant.id,
        start_date=start,
        end_date=date(2027, 10, 31),
        monthly_rent=Decimal("15000"),
    )

    assert lease.status == LeaseStatus.ACTIVE
    assert unit.status == UnitStatus.FULLY_BOOKED
    assert unit.bedrooms[0].status == BedroomStatus.OCCUPIED

    invoices = db.query(Invoice).filter(Invoice.lease_id == lease.id).all()
    assert len(invoices) == 1
    invoice = invoices[0]
    assert invoice.invoice_no == "INV-LEASE-00001"
    assert invoice.month == "November 2026"
    assert invoice.amount == Decimal("15000")
    assert invoice.balance_due == Decimal("15000")
    assert invoice.status == InvoiceStatus.SENT
    assert invoice.due_date == start

    assert (tenant.unit_id, tenant.bedroom_id, tenant.building_id) == (unit.id, None, unit.property_id)


def test_security_deposit_booked_as_liability(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    lease = activate(unit, make_tenant(), deposit=Decimal("24000"))

    entry = db.query(Transaction).filter(Transaction.lease_id == lease.id).one()
    assert entry.type == TransactionType.LIABILITY
    assert entry.amount == Decimal("24000")
    assert entry.balance == Decimal("24000")
    assert entry.description == f"Security Deposit Received - Lease {lease.id}"


def test_zero_deposit_writes_no_ledger_row(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    activate(unit, make_tenant(), deposit=Decimal("0"))
    assert db.query(Transaction).count() == 0


def test_draft_deposit_booked_on_activation(db, make_unit, make_tenant):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    draft = LeaseService.create_lease(
        db, unit_id=unit.id, tenant_id=make_tenant().id, security_deposit=Decimal("24000")
    )
    assert db.query(Transaction).count() == 0

    lease = LeaseService.activate_lease(db, draft.id)

    entry = db.query(Transaction).filter(Transaction.lease_id == lease.id).one()
    assert entry.type == TransactionType.LIABILITY
    assert entry.amount == Decimal("24000")


def test_draft_deposit_booked_when_create_finalizes(db, make_unit, make_tenant):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    tenant = make_tenant()
    draft = LeaseService.create_lease(
        db, unit_id=unit.id, tenant_id=tenant.id, security_deposit=Decimal("15000")
    )

    LeaseService.create_lease(
        db,
        unit_id=unit.id,
        tenant_id=tenant.id,
        start_date=date.today(),
        monthly_rent=Decimal("9000"),
    )

    entry = db.query(Transaction).filter(Transaction.lease_id == draft.id).one()
    assert entry.amount == Decimal("15000")


def test_deposit_is_booked_once_per_lease(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    lease = activate(unit, make_tenant(), deposit=Decimal("5000"))

    again = record_security_deposit(db, lease, lease.security_deposit)

    assert db.query(Transaction).filter(Transaction.type == TransactionType.LIABILITY).count() == 1
    assert again.lease_id == lease.id


def test_draft_reservation_leaves_occupancy_alone(db, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant()
    bedroom = unit.bedrooms[0]

    lease = LeaseService.create_lease(db, unit_id=unit.id, tenant_id=tenant.id, bedroom_id=bedroom.id)

    assert lease.status == LeaseStatus.DRAFT
    assert bedroom.status == BedroomStatus.VACANT
    assert unit.status == UnitStatus.VACANT
    assert db.query(Invoice).count() == 0
    assert (tenant.unit_id, tenant.bedroom_id) == (unit.id, bedroom.id)


def test_draft_blocks_other_tenant(db, make_unit, make_tenant):
    unit = make_unit()
    bedroom = unit.bedrooms[0]
    LeaseService.create_lease(db, unit_id=unit.id, tenant_id=make_tenant().id, bedroom_id=bedroom.id)

    with pytest.raises(OccupancyConflictError) as exc_info:
        LeaseService.create_lease(db, unit_id=unit.id, tenant_id=make_tenant().id, bedroom_id=bedroom.id)
    assert "reserved" in str(exc_info.value)


def test_create_finalizes_existing_draft(db, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant()
    bedroom = unit.bedrooms[2]
    draft = LeaseService.create_lease(db, unit_id=unit.id, tenant_id=tenant.id, bedroom_id=bedroom.id)

    lease = LeaseService.create_lease(
        db,
        unit_id=unit.id,
        tenant_id=tenant.id,
        start_date=date.today(),
        monthly_rent=Decimal("9000"),
    )

    assert lease.id == draft.id
    assert lease.status == LeaseStatus.ACTIVE
    assert lease.bedroom_id == bedroom.id
    assert bedroom.status == BedroomStatus.OCCUPIED
    assert db.query(Lease).count() == 1


def test_activate_draft(db, make_unit, make_tenant):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=2)
    tenant = make_tenant()
    draft = LeaseService.create_lease(db, unit_id=unit.id, tenant_id=tenant.id)

    lease = LeaseService.activate_lease(db, draft.id)

    assert lease.status == LeaseStatus.ACTIVE
    assert lease.start_date == date.today()
    assert lease.monthly_rent == Decimal("0")
    assert unit.status == UnitStatus.FULLY_BOOKED
    assert all(b.status == BedroomStatus.OCCUPIED for b in unit.bedrooms)
    assert InvoiceStatus.SENT == db.query(Invoice).filter(Invoice.lease_id == lease.id).one().status


def test_activate_uses_tenant_bedroom_when_lease_has_none(db, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant()
    bedroom = unit.bedrooms[1]
    draft = LeaseService.create_lease(db, unit_id=unit.id, tenant_id=tenant.id, bedroom_id=bedroom.id)
    draft.bedroom_id = None
    db.flush()

    LeaseService.activate_lease(db, draft.id)

    assert draft.bedroom_id == bedroom.id
    assert bedroom.status == BedroomStatus.OCCUPIED
    assert unit.status == UnitStatus.OCCUPIED


def test_activate_twice_is_rejected(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    lease = activate(unit, make_tenant())

    with pytest.raises(InvalidTransitionError):
        LeaseService.activate_lease(db, lease.id)


def test_activate_unknown_lease(db):
    with pytest.raises(NotFoundError) as exc_info:
        LeaseService.activate_lease(db, 999)
    assert str(exc_info.value) == "Lease with ID 999 not found"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"unit_id": None, "tenant_id": 1},
        {"unit_id": 1, "tenant_id": None},
        {"unit_id": 1, "tenant_id": 1, "start_date": date(2026, 5, 1), "end_date": date(2026, 4, 1)},
        {"unit_id": 1, "tenant_id": 1, "monthly_rent": Decimal("-1")},
    ],
)
def test_create_validation(db, kwargs):
    with pytest.raises(LeaseValidationError):
        LeaseService.create_lease(db, **kwargs)
    assert db.query(Lease).count() == 0


def test_create_rejects_non_tenant_user(db, make_unit):
    unit = make_unit()
    admin = User(first_name="Ana", role=UserRole.ADMIN)
    db.add(admin)
    db.flush()

    with pytest.raises(NotFoundError):
        LeaseService.create_lease(db, unit_id=unit.id, tenant_id=admin.id)


def test_update_rent_backfills_zero_invoices(db, make_unit, make_tenant):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    draft = LeaseService.create_lease(db, unit_id=unit.id, tenant_id=make_tenant().id)
    lease = LeaseService.activate_lease(db, draft.id)
    invoice = db.query(Invoice).filter(Invoice.lease_id == lease.id).one()
    assert invoice.amount == Decimal("0")

    LeaseService.update_lease_rent(db, lease.id, Decimal("18000"))

    assert lease.monthly_rent == Decimal("18000")
    assert invoice.rent == Decimal("18000")
    assert invoice.amount == Decimal("18000")
    assert invoice.balance_due == Decimal("18000")
    assert lease.status == LeaseStatus.ACTIVE


def test_update_rent_leaves_billed_invoices(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    lease = activate(unit, make_tenant(), rent=Decimal("12000"))

    LeaseService.update_lease_rent(db, lease.id, Decimal("13000"))

    invoice = db.query(Invoice).filter(Invoice.lease_id == lease.id).one()
    assert invoice.amount == Decimal("12000")


def test_delete_active_full_unit_lease_restores_vacancy(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=2)
    tenant = make_tenant()
    lease = activate(unit, tenant, deposit=Decimal("5000"))
    lease_id = lease.id

    result = LeaseService.delete_lease(db, lease_id)

    assert result == {"message": "Lease deleted", "lease_id": lease_id, "unwound": True}
    assert db.query(Lease).filter(Lease.id == lease_id).first() is None
    assert unit.status == UnitStatus.VACANT
    assert all(b.status == BedroomStatus.VACANT for b in unit.bedrooms)
    assert (tenant.unit_id, tenant.bedroom_id, tenant.building_id) == (None, None, None)

    # Billing history survives
    invoice = db.query(Invoice).filter(Invoice.tenant_id == tenant.id).one()
    assert invoice.lease_id is None
    assert db.query(Transaction).one().lease_id is None


def test_delete_one_bedroom_lease_keeps_unit_occupied(db, make_unit, make_tenant, activate):
    unit = make_unit()
    b1, b2, _ = unit.bedrooms
    first = activate(unit, make_tenant(), bedroom=b1)
    activate(unit, make_tenant(), bedroom=b2)

    LeaseService.delete_lease(db, first.id)

    assert b1.status == BedroomStatus.VACANT
    assert b2.status == BedroomStatus.OCCUPIED
    assert unit.status == UnitStatus.OCCUPIED


def test_delete_draft_clears_reservation(db, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant()
    draft = LeaseService.create_lease(db, unit_id=unit.id, tenant_id=tenant.id, bedroom_id=unit.bedrooms[0].id)

    result = LeaseService.delete_lease(db, draft.id)

    assert result["unwound"] is False
    assert tenant.unit_id is None
    assert unit.status == UnitStatus.VACANT


def test_lease_history_and_current_lease(db, make_unit, make_tenant):
    unit = make_unit(unit_number="7A")
    tenant = make_tenant(first_name="Maria")
    start = date.today() - timedelta(days=40)
    lease = LeaseService.create_lease(
        db,
        unit_id=unit.id,
        tenant_id=tenant.id,
        bedroom_id=unit.bedrooms[0].id,
        start_date=start,
        end_date=start + timedelta(days=365),
        monthly_rent=Decimal("8000"),
    )

    history = LeaseService.get_lease_history(db)
    assert len(history) == 1
    row = history[0]
    assert row["unit"] == "7A"
    assert row["scope"] == "Per Bedroom"
    assert row["status"] == "active"
    assert row["tenant"] == "Maria Cruz"
    assert row["term"] == f"{start:%Y-%m} - {start + timedelta(days=365):%Y-%m}"

    current = LeaseService.get_current_lease_for_unit(db, unit.id)
    assert current["lease_id"] == lease.id
    assert current["tenant_name"] == "Maria Cruz"

    with_tenants = LeaseService.get_units_with_tenants(db, unit.property_id, RentalMode.BEDROOM_WISE)
    assert [u["id"] for u in with_tenants] == [unit.id]
    assert LeaseService.get_units_with_tenants(db, unit.property_id, RentalMode.FULL_UNIT) == []


def test_month_label():
    assert month_label(date(2026, 10, 17)) == "October 2026"
