"""Seed script to populate the database with sample data."""

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from rentledger import models  # noqa: F401
from rentledger.core.database import Base, SessionLocal, engine
from rentledger.models.enums import RentPurpose, UtilityCategory
from rentledger.models.landlord import Landlord
from rentledger.schemas.address import AddressCreate
from rentledger.schemas.landlord import LandlordCreate
from rentledger.schemas.property import PropertyCreate
from rentledger.schemas.rate import RateUpdate
from rentledger.schemas.rent import RentCreate
from rentledger.schemas.state import MeterReadings
from rentledger.schemas.tenant import TenantCreate
from rentledger.services import invoicing, landlord, rate_catalog, rent, state_ledger, tenant
from rentledger.services import property as property_service

# Monthly register values after the initial reading
MONTHLY_READINGS = [
    {
        UtilityCategory.COLD_WATER: Decimal("112.500"),
        UtilityCategory.HOT_WATER: Decimal("54.200"),
        UtilityCategory.ENERGY: Decimal("2310.000"),
    },
    {
        UtilityCategory.COLD_WATER: Decimal("124.900"),
        UtilityCategory.HOT_WATER: Decimal("58.700"),
        UtilityCategory.ENERGY: Decimal("2465.500"),
    },
]


def seed_database(db: Session) -> bool:
    """Seed the database with sample data; returns False if data already exists."""
    if db.query(Landlord).first():
        print("Database already has data. Skipping seed.")
        return False

    print("Seeding database...")

    owner = landlord.create_landlord(
        db,
        LandlordCreate(
            name="Anna",
            surname="Kowalska",
            email="anna.kowalska@example.com",
            phone_prefix="+48",
            phone_number="501234567",
            bank_account="61109010140000071219812874",
            address=AddressCreate(
                country="Poland",
                city="Krakow",
                street="Dluga",
                building_number="12",
                postal_code="31-147",
            ),
        ),
    )
    print(f"Created landlord: {owner.name} {owner.surname} (ID: {owner.id})")

    flat = property_service.create_property(
        db,
        PropertyCreate(
            flat_label="Dluga 12/4",
            room_count=2,
            flat_size=Decimal("48.50"),
            has_hot_water=True,
            landlord_id=owner.id,
            address=AddressCreate(
                country="Poland",
                city="Krakow",
                street="Dluga",
                building_number="12",
                flat_number="4",
                postal_code="31-147",
            ),
        ),
    )
    rate_catalog.set_rate(
        db,
        flat.id,
        RateUpdate(
            landlord_rent=Decimal("2200.00"),
            housing_rent=Decimal("450.00"),
            cold_water_price=Decimal("14.20"),
            hot_water_price=Decimal("32.80"),
            energy_price=Decimal("0.89"),
            energy_subscription=Decimal("12.50"),
            water_vat=Decimal("8"),
            energy_vat=Decimal("23"),
        ),
    )
    print(f"Created property: {flat.flat_label} (ID: {flat.id}) with its rate")

    occupant = tenant.create_tenant(
        db,
        TenantCreate(
            name="Piotr",
            surname="Nowak",
            email="piotr.nowak@example.com",
            address=AddressCreate(
                country="Poland",
                city="Warszawa",
                street="Marszalkowska",
                building_number="100",
                postal_code="00-026",
            ),
        ),
    )
    print(f"Created tenant: {occupant.name} {occupant.surname} (ID: {occupant.id})")

    contract = rent.create_rent(
        db,
        RentCreate(
            property_id=flat.id,
            tenant_id=occupant.id,
            landlord_id=owner.id,
            rent_purpose=RentPurpose.LIVE,
            start_rent=date(2024, 1, 1),
            end_rent=date(2026, 12, 31),
            tenant_count=1,
            rent_deposit=Decimal("4400.00"),
            pay_day_delay=10,
            send_state_day=25,
            initial_readings=MeterReadings(
                cold_water=Decimal("100.000"),
                hot_water=Decimal("50.000"),
                energy=Decimal("2150.000"),
            ),
        ),
    )

    for readings in MONTHLY_READINGS:
        state = state_ledger.append_state(db, contract.id, readings)
        state_ledger.confirm_state(db, state.id)
        invoice = invoicing.issue_invoice(db, state.id)
        print(f"Issued invoice {invoice.id} for state {state.sequence}: {invoice.total_gross} gross")

    print("\nSeed data created successfully!")
    print(f"\nRent ID: {contract.id}")
    return True


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_database(session)
