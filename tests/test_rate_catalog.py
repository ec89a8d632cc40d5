"""Tests for versioned property rates."""

from decimal import Decimal

import pytest
from sqlalchemy import text

from rentledger.core.database import commit_or_conflict
from rentledger.core.errors import ConflictError, NotFoundError, ValidationError
from rentledger.models.rate import Rate
from rentledger.services import property as property_service
from rentledger.services import rate_catalog, soft_delete


def test_new_rate_supersedes_active(db, flat, rate_update) -> None:
    first = rate_catalog.get_current_rate(db, flat.id)

    second = rate_catalog.set_rate(db, flat.id, rate_update(energy_price=Decimal("0.75")))

    db.refresh(first)
    assert not first.is_active
    assert first.superseded_at is not None
    assert first.energy_price == Decimal("0.50")
    assert second.is_active
    assert rate_catalog.get_current_rate(db, flat.id).id == second.id
    assert [r.id for r in rate_catalog.get_rate_history(db, flat.id)] == [second.id, first.id]


def test_price_required_for_every_utility(db, flat, rate_update) -> None:
    with pytest.raises(ValidationError, match="hot_water"):
        rate_catalog.set_rate(db, flat.id, rate_update(hot_water_price=None))

    # The active rate is untouched
    assert rate_catalog.get_current_rate(db, flat.id).hot_water_price == Decimal("20.00")


def test_optional_utility_price_not_required(db, create_property, landlord, rate_update) -> None:
    plain = create_property(landlord.id, with_rate=False, has_hot_water=False)

    rate = rate_catalog.set_rate(db, plain.id, rate_update(hot_water_price=None))

    assert rate.hot_water_price is None


def test_property_without_rate(db, create_property, landlord) -> None:
    plain = create_property(landlord.id, with_rate=False)

    assert rate_catalog.get_active_rate(db, plain.id) is None
    with pytest.raises(NotFoundError):
        rate_catalog.get_current_rate(db, plain.id)


def test_unknown_property(db, rate_update) -> None:
    with pytest.raises(NotFoundError):
        rate_catalog.set_rate(db, 777, rate_update())


def test_deleted_property_rejected(db, flat, rate_update) -> None:
    soft_delete.soft_delete_property(db, flat.id)

    with pytest.raises(ValidationError):
        rate_catalog.set_rate(db, flat.id, rate_update())


def test_one_active_rate_per_property(db, flat) -> None:
    db.add(
        Rate(
            property_id=flat.id,
            cold_water_price=Decimal("1"),
            energy_price=Decimal("1"),
            is_active=True,
        )
    )

    with pytest.raises(ConflictError):
        commit_or_conflict(db, "second active rate")


def test_enabling_unpriced_utility_rejected(db, flat, switch_utilities) -> None:
    with pytest.raises(ValidationError, match="gas"):
        switch_utilities(flat, has_gas=True)

    assert property_service.get_property(db, flat.id).has_gas is False


def test_enabling_utility_after_pricing_it(db, flat, rate_update, switch_utilities) -> None:
    rate_catalog.set_rate(db, flat.id, rate_update(heat_price=Decimal("80.00")))

    assert switch_utilities(flat, has_heat=True).has_heat is True


def test_update_of_vanished_rate_conflicts(db, flat) -> None:
    rate = rate_catalog.get_current_rate(db, flat.id)
    rate.landlord_rent = Decimal("1100.00")
    db.execute(text("DELETE FROM rates WHERE id = :id"), {"id": rate.id})

    with pytest.raises(ConflictError):
        commit_or_conflict(db, "rate changed concurrently")
