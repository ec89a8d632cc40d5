"""Shared fixtures: an in-memory database, a test client and sample aggregates."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from rentledger.core.database import Base, get_db  # noqa: E402
from rentledger.main import app  # noqa: E402
from rentledger.models.enums import RentPurpose  # noqa: E402
from rentledger.schemas.address import AddressCreate  # noqa: E402
from rentledger.schemas.landlord import LandlordCreate  # noqa: E402
from rentledger.schemas.property import PropertyCreate, PropertyUpdate  # noqa: E402
from rentledger.schemas.rate import RateUpdate  # noqa: E402
from rentledger.schemas.rent import RentCreate  # noqa: E402
from rentledger.schemas.state import MeterReadings  # noqa: E402
from rentledger.schemas.tenant import TenantCreate  # noqa: E402
from rentledger.services import landlord as landlord_service  # noqa: E402
from rentledger.services import property as property_service  # noqa: E402
from rentledger.services import rate_catalog  # noqa: E402
from rentledger.services import rent as rent_service  # noqa: E402
from rentledger.services import tenant as tenant_service  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_address(city: str = "Krakow") -> AddressCreate:
    return AddressCreate(
        country="Poland",
        city=city,
        street="Florianska",
        building_number="7",
        flat_number="3",
        postal_code="31-019",
    )


def make_rate(**overrides) -> RateUpdate:
    """Rate used by most tests; see test_invoicing for the resulting totals."""
    values = {
        "landlord_rent": Decimal("1000.00"),
        "housing_rent": Decimal("200.00"),
        "cold_water_price": Decimal("10.00"),
        "hot_water_price": Decimal("20.00"),
        "energy_price": Decimal("0.50"),
        "energy_subscription": Decimal("10.00"),
        "water_vat": Decimal("8"),
        "energy_vat": Decimal("23"),
    }
    values.update(overrides)
    return RateUpdate(**values)


INITIAL_READINGS = MeterReadings(
    cold_water=Decimal("100"),
    hot_water=Decimal("50"),
    energy=Decimal("1000"),
)


@pytest.fixture
def db():
    """Fresh schema and session for every test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Test client whose requests share the test session."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def create_landlord(db):
    counter = iter(range(1, 1000))

    def _create(**overrides):
        values = {
            "name": "Jan",
            "surname": "Kowalski",
            "email": f"landlord{next(counter)}@example.com",
            "address": make_address(),
        }
        values.update(overrides)
        return landlord_service.create_landlord(db, LandlordCreate(**values))

    return _create


@pytest.fixture
def create_tenant(db):
    counter = iter(range(1, 1000))

    def _create(**overrides):
        values = {
            "name": "Ewa",
            "surname": "Nowak",
            "email": f"tenant{next(counter)}@example.com",
            "address": make_address("Gdansk"),
        }
        values.update(overrides)
        return tenant_service.create_tenant(db, TenantCreate(**values))

    return _create


@pytest.fixture
def create_property(db):
    def _create(landlord_id: int, with_rate: bool = True, **overrides):
        values = {
            "flat_label": "Florianska 7/3",
            "room_count": 3,
            "flat_size": Decimal("62.40"),
            "has_hot_water": True,
            "landlord_id": landlord_id,
            "address": make_address(),
        }
        values.update(overrides)
        db_property = property_service.create_property(db, PropertyCreate(**values))
        if with_rate:
            rate_catalog.set_rate(db, db_property.id, make_rate())
        return db_property

    return _create


@pytest.fixture
def create_rent(db):
    def _create(
        db_property,
        tenant,
        start: date = date(2024, 1, 1),
        end: date = date(2099, 1, 1),
        readings: MeterReadings = INITIAL_READINGS,
    ):
        return rent_service.create_rent(
            db,
            RentCreate(
                property_id=db_property.id,
                tenant_id=tenant.id,
                landlord_id=db_property.landlord_id,
                rent_purpose=RentPurpose.LIVE,
                start_rent=start,
                end_rent=end,
                tenant_count=2,
                rent_deposit=Decimal("3000.00"),
                pay_day_delay=10,
                send_state_day=28,
                initial_readings=readings,
            ),
        )

    return _create


@pytest.fixture
def landlord(create_landlord):
    return create_landlord()


@pytest.fixture
def tenant(create_tenant):
    return create_tenant()


@pytest.fixture
def flat(create_property, landlord):
    """A property with hot water and an active rate."""
    return create_property(landlord.id)


@pytest.fixture
def rent(create_rent, flat, tenant):
    """An ongoing rent of ``flat`` with its initial state."""
    return create_rent(flat, tenant)


@pytest.fixture
def rate_update():
    """Factory for rate payloads based on the default test rate."""
    return make_rate


@pytest.fixture
def switch_utilities(db):
    """Factory replacing a property's utility flags while keeping its other fields."""

    def _switch(db_property, **flags):
        values = {
            "flat_label": db_property.flat_label,
            "room_count": db_property.room_count,
            "flat_size": db_property.flat_size,
            "has_gas": db_property.has_gas,
            "has_hot_water": db_property.has_hot_water,
            "has_heat": db_property.has_heat,
            "landlord_comment": db_property.landlord_comment,
            "address": make_address(),
        }
        values.update(flags)
        return property_service.update_property(db, db_property.id, PropertyUpdate(**values))

    return _switch
