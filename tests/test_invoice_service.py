from datetime import date
from decimal import Decimal

from models import Invoice, InvoiceSequence, InvoiceStatus, RentalMode, TransactionType
from services.invoice_service import InvoiceService
from services.lease_service import LeaseService
from services.ledger_service import append_transaction, verify_running_balance


def test_ensure_invoice_for_month_is_idempotent(db, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant()

    first = InvoiceService.ensure_invoice_for_month(
        db, tenant.id, unit.id, "October 2026", Decimal("5000"), date(2026, 10, 5)
    )
    second = InvoiceService.ensure_invoice_for_month(
        db, tenant.id, unit.id, "October 2026", Decimal("9999"), date(2026, 10, 5)
    )

    assert first.id == second.id
    assert db.query(Invoice).count() == 1
    assert second.amount == Decimal("5000")


def test_invoice_numbers_continue_from_existing_count(db, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant()
    db.add(Invoice(
        invoice_no="LEGACY-1",
        tenant_id=tenant.id,
        unit_id=unit.id,
        month="January 2026",
        due_date=date(2026, 1, 5),
    ))
    db.flush()

    assert InvoiceService.next_invoice_number(db) == "INV-LEASE-00002"
    assert InvoiceService.next_invoice_number(db, "INV-AUTO") == "INV-AUTO-00003"
    assert db.query(InvoiceSequence).one().last_value == 3


def test_monthly_run_bills_each_active_lease_once(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    other = make_unit(unit_number="102", rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    start = date(2026, 9, 1)
    lease = activate(unit, make_tenant(), rent=Decimal("11000"), start=start)
    activate(other, make_tenant(), rent=Decimal("13000"), start=start)
    run_date = date(2026, 10, 17)

    created = InvoiceService.generate_monthly_invoices(db, today=run_date)
    assert len(created) == 2
    invoice = next(i for i in created if i.lease_id == lease.id)
    assert invoice.invoice_no.startswith("INV-AUTO-")
    assert invoice.month == "October 2026"
    assert invoice.amount == Decimal("11000")
    assert invoice.status == InvoiceStatus.SENT
    assert invoice.due_date == date(2026, 10, 5)

    assert InvoiceService.generate_monthly_invoices(db, today=run_date) == []
    assert db.query(Invoice).filter(Invoice.month == "October 2026").count() == 2


def test_monthly_run_skips_ended_and_draft_leases(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    lease = activate(unit, make_tenant(), start=date(2026, 1, 1))
    lease.end_date = date(2026, 6, 30)
    draft_unit = make_unit(unit_number="103")
    LeaseService.create_lease(db, unit_id=draft_unit.id, tenant_id=make_tenant().id)
    db.flush()

    assert InvoiceService.generate_monthly_invoices(db, today=date(2026, 10, 1)) == []


def test_monthly_run_does_not_duplicate_first_invoice(db, make_unit, make_tenant, activate):
    unit = make_unit(rental_mode=RentalMode.FULL_UNIT, bedroom_count=1)
    today = date.today()
    activate(unit, make_tenant(), start=today)

    assert InvoiceService.generate_monthly_invoices(db, today=today) == []


def test_running_balance(db):
    append_transaction(db, "Deposit", TransactionType.LIABILITY, Decimal("1000"))
    second = append_transaction(db, "Refund", TransactionType.EXPENSE, Decimal("-250"))

    assert second.balance == Decimal("750")
    assert verify_running_balance(db) == (True, "Running balance verified", 2)


def test_running_balance_detects_tampering(db):
    entry = append_transaction(db, "Deposit", TransactionType.LIABILITY, Decimal("1000"))
    entry.balance = Decimal("999")
    db.flush()

    valid, message, _ = verify_running_balance(db)
    assert not valid
    assert str(entry.id) in message


def test_ledger_row_stamped_by_database(db):
    entry = append_transaction(db, "Deposit", TransactionType.LIABILITY, Decimal("1000"))
    db.refresh(entry)

    assert entry.date is not None
