"""Tests for the pure invoice calculation."""

from decimal import Decimal

import pytest

from rentledger.core.errors import ValidationError
from rentledger.models.enums import ChargeKind, UtilityCategory
from rentledger.models.rate import Rate
from rentledger.models.state import State
from rentledger.services.invoice_calculator import compute_invoice, price_line, round_money


def _state(state_id: int, sequence: int, rent_id: int = 1, is_initial: bool = False, rate_id=7, **readings):
    state = State(
        id=state_id,
        rent_id=rent_id,
        sequence=sequence,
        is_initial=is_initial,
        is_confirmed=True,
        rate_id=rate_id,
    )
    state.set_readings({UtilityCategory(k): Decimal(v) for k, v in readings.items()})
    return state


def _rate(**overrides) -> Rate:
    values = {
        "id": 7,
        "property_id": 1,
        "landlord_rent": Decimal("0"),
        "housing_rent": Decimal("0"),
        "cold_water_price": Decimal("10.00"),
        "hot_water_price": None,
        "gas_price": None,
        "energy_price": Decimal("0"),
        "heat_price": None,
        "gas_subscription": None,
        "energy_subscription": None,
        "heat_subscription": None,
        "landlord_rent_vat": None,
        "housing_rent_vat": None,
        "water_vat": Decimal("23"),
        "gas_vat": None,
        "energy_vat": None,
        "heat_vat": None,
    }
    values.update(overrides)
    return Rate(**values)


class TestRounding:
    """Banker's rounding to cents."""

    def test_half_rounds_to_even(self) -> None:
        assert round_money(Decimal("0.125")) == Decimal("0.12")
        assert round_money(Decimal("0.135")) == Decimal("0.14")

    def test_rounds_each_component_once(self) -> None:
        line = price_line(ChargeKind.METERED, Decimal("1"), Decimal("0.125"), Decimal("10"))
        assert line.net_amount == Decimal("0.12")
        assert line.vat_amount == Decimal("0.01")
        assert line.gross_amount == Decimal("0.13")


class TestComputeInvoice:
    """Unit tests for compute_invoice."""

    def test_consumption_is_delta(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="100", energy="0")
        current = _state(2, 2, cold_water="110", energy="0")

        draft = compute_invoice(current, previous, _rate())

        line = draft.get_line(ChargeKind.METERED, UtilityCategory.COLD_WATER)
        assert line.consumption == Decimal("10")
        assert line.previous_value == Decimal("100")
        assert line.current_value == Decimal("110")

    def test_vat_arithmetic(self) -> None:
        """Price 10.00, consumption 10, VAT 23% gives 100.00 + 23.00 = 123.00."""
        previous = _state(1, 1, is_initial=True, cold_water="100", energy="0")
        current = _state(2, 2, cold_water="110", energy="0")

        draft = compute_invoice(current, previous, _rate())

        line = draft.get_line(ChargeKind.METERED, UtilityCategory.COLD_WATER)
        assert line.net_amount == Decimal("100.00")
        assert line.vat_amount == Decimal("23.00")
        assert line.gross_amount == Decimal("123.00")
        assert draft.total_gross == Decimal("123.00")

    def test_full_invoice_totals(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="100", hot_water="50", energy="1000")
        current = _state(2, 2, cold_water="110", hot_water="52", energy="1100")
        rate = _rate(
            landlord_rent=Decimal("1000.00"),
            housing_rent=Decimal("200.00"),
            hot_water_price=Decimal("20.00"),
            energy_price=Decimal("0.50"),
            energy_subscription=Decimal("10.00"),
            water_vat=Decimal("8"),
            energy_vat=Decimal("23"),
        )

        draft = compute_invoice(current, previous, rate)

        assert [(line.kind, line.category) for line in draft.lines] == [
            (ChargeKind.METERED, UtilityCategory.COLD_WATER),
            (ChargeKind.METERED, UtilityCategory.HOT_WATER),
            (ChargeKind.METERED, UtilityCategory.ENERGY),
            (ChargeKind.SUBSCRIPTION, UtilityCategory.ENERGY),
            (ChargeKind.LANDLORD_RENT, None),
            (ChargeKind.HOUSING_RENT, None),
        ]
        assert draft.total_net == Decimal("1400.00")
        assert draft.total_vat == Decimal("25.00")
        assert draft.total_gross == Decimal("1425.00")
        assert draft.total_gross == sum(line.gross_amount for line in draft.lines)

    def test_missing_vat_means_zero(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="0", energy="0")
        current = _state(2, 2, cold_water="0", energy="0")

        draft = compute_invoice(current, previous, _rate(landlord_rent=Decimal("1500.00")))

        line = draft.get_line(ChargeKind.LANDLORD_RENT)
        assert line.vat_rate == Decimal("0")
        assert line.vat_amount == Decimal("0.00")
        assert line.gross_amount == Decimal("1500.00")

    def test_subscription_only_for_measured_utilities(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="0", energy="0")
        current = _state(2, 2, cold_water="0", energy="0")
        rate = _rate(gas_subscription=Decimal("15.00"), energy_subscription=Decimal("5.00"))

        draft = compute_invoice(current, previous, rate)

        assert draft.get_line(ChargeKind.SUBSCRIPTION, UtilityCategory.ENERGY) is not None
        assert draft.get_line(ChargeKind.SUBSCRIPTION, UtilityCategory.GAS) is None

    def test_deterministic(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="100.125", energy="10")
        current = _state(2, 2, cold_water="117.333", energy="12.5")
        rate = _rate(energy_price=Decimal("0.7731"), energy_vat=Decimal("23"))

        first = compute_invoice(current, previous, rate)
        second = compute_invoice(current, previous, rate)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_does_not_mutate_inputs(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="100", energy="0")
        current = _state(2, 2, cold_water="110", energy="0")

        compute_invoice(current, previous, _rate())

        assert current.get_readings() == {
            UtilityCategory.COLD_WATER: Decimal("110"),
            UtilityCategory.ENERGY: Decimal("0"),
        }
        assert previous.get_readings()[UtilityCategory.COLD_WATER] == Decimal("100")

    def test_negative_consumption_rejected(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="110", energy="0")
        current = _state(2, 2, cold_water="100", energy="0")

        with pytest.raises(ValidationError):
            compute_invoice(current, previous, _rate())

    def test_utility_enabled_since_previous_state_is_not_metered(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="100", energy="0")
        current = _state(2, 2, cold_water="110", gas="5", energy="0")
        rate = _rate(gas_price=Decimal("3.00"), gas_subscription=Decimal("15.00"))

        draft = compute_invoice(current, previous, rate)

        assert draft.get_line(ChargeKind.METERED, UtilityCategory.GAS) is None
        assert draft.get_line(ChargeKind.SUBSCRIPTION, UtilityCategory.GAS).net_amount == Decimal("15.00")
        assert draft.total_net == Decimal("115.00")

    def test_utility_enabled_earlier_is_metered_from_first_reading(self) -> None:
        previous = _state(2, 2, cold_water="110", gas="5", energy="0")
        current = _state(3, 3, cold_water="110", gas="9", energy="0")

        draft = compute_invoice(current, previous, _rate(gas_price=Decimal("3.00")))

        line = draft.get_line(ChargeKind.METERED, UtilityCategory.GAS)
        assert line.consumption == Decimal("4")
        assert line.net_amount == Decimal("12.00")

    def test_missing_price_rejected(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="100", hot_water="1", energy="0")
        current = _state(2, 2, cold_water="110", hot_water="5", energy="0")

        with pytest.raises(ValidationError, match="price"):
            compute_invoice(current, previous, _rate())

    def test_states_of_different_rents_rejected(self) -> None:
        previous = _state(1, 1, rent_id=1, is_initial=True, cold_water="100", energy="0")
        current = _state(2, 2, rent_id=2, cold_water="110", energy="0")

        with pytest.raises(ValidationError):
            compute_invoice(current, previous, _rate())

    def test_wrong_order_rejected(self) -> None:
        previous = _state(1, 3, cold_water="100", energy="0")
        current = _state(2, 2, cold_water="110", energy="0")

        with pytest.raises(ValidationError):
            compute_invoice(current, previous, _rate())

    def test_initial_state_cannot_be_billed(self) -> None:
        previous = _state(1, 1, cold_water="100", energy="0")
        current = _state(2, 2, is_initial=True, cold_water="110", energy="0")

        with pytest.raises(ValidationError):
            compute_invoice(current, previous, _rate())

    def test_rate_must_match_state(self) -> None:
        previous = _state(1, 1, is_initial=True, cold_water="100", energy="0")
        current = _state(2, 2, rate_id=8, cold_water="110", energy="0")

        with pytest.raises(ValidationError, match="rate"):
            compute_invoice(current, previous, _rate())
