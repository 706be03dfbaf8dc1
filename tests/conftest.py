from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base, RentalMode, User, UserRole
from services.inventory_service import InventoryService
from services.lease_service import LeaseService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def make_property(db):
    def _make(name="Sunset Condos"):
        return InventoryService.create_property(db, name=name, city="Makati")
    return _make


@pytest.fixture
def make_unit(db, make_property):
    def _make(
        unit_number="101",
        rental_mode=RentalMode.BEDROOM_WISE,
        bedroom_count=3,
        property_id=None,
        rent_amount=Decimal("30000"),
        bedroom_rent=Decimal("10000"),
    ):
        if property_id is None:
            property_id = make_property().id
        return InventoryService.create_unit(
            db,
            property_id=property_id,
            unit_number=unit_number,
            rental_mode=rental_mode,
            bedroom_count=bedroom_count,
            rent_amount=rent_amount,
            bedroom_rent=bedroom_rent,
        )
    return _make


@pytest.fixture
def make_tenant(db):
    counter = {"n": 0}

    def _make(first_name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        tenant = User(
            first_name=first_name or f"Tenant{n}",
            last_name="Cruz",
            email=email or f"tenant{n}@example.com",
            role=UserRole.TENANT,
        )
        db.add(tenant)
        db.flush()
        return tenant
    return _make


@pytest.fixture
def activate(db):
    """Create an Active lease in one call."""
    def _activate(unit, tenant, bedroom=None, rent=Decimal("12000"), deposit=None, start=None):
        return LeaseService.create_lease(
            db,
            unit_id=unit.id,
            tenant_id=tenant.id,
            bedroom_id=bedroom.id if bedroom is not None else None,
            start_date=start or date.today(),
            monthly_rent=rent,
            security_deposit=deposit,
        )
    return _activate
