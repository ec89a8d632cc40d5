"""Invoice calculation from two consecutive states and a rate.

Pure functions only: nothing here touches the database or mutates its
arguments, so the same inputs always give an equal draft.
"""

from decimal import ROUND_HALF_EVEN, Decimal

from rentledger.core.errors import ValidationError
from rentledger.models.enums import SUBSCRIBED, ChargeKind, UtilityCategory
from rentledger.models.rate import Rate
from rentledger.models.state import State
from rentledger.schemas.invoice import InvoiceDraft, InvoiceLineDraft

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def round_money(amount: Decimal) -> Decimal:
    """Round to whole cents, ties to even."""
    return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)


def price_line(
    kind: ChargeKind,
    quantity: Decimal,
    unit_price: Decimal,
    vat_rate: Decimal | None,
    category: UtilityCategory | None = None,
    previous_value: Decimal | None = None,
    current_value: Decimal | None = None,
) -> InvoiceLineDraft:
    """Price one charge; net and VAT are each rounded once, gross is their sum."""
    vat = vat_rate if vat_rate is not None else Decimal("0")
    net_amount = round_money(quantity * unit_price)
    vat_amount = round_money(net_amount * vat / HUNDRED)
    return InvoiceLineDraft(
        kind=kind,
        category=category,
        previous_value=previous_value,
        current_value=current_value,
        consumption=quantity if kind == ChargeKind.METERED else None,
        unit_price=unit_price,
        vat_rate=vat,
        net_amount=net_amount,
        vat_amount=vat_amount,
        gross_amount=net_amount + vat_amount,
    )


def _metered_lines(current: State, previous: State, rate: Rate) -> list[InvoiceLineDraft]:
    lines = []
    now = current.get_readings()
    before = previous.get_readings()
    for category in UtilityCategory:
        if category not in now:
            continue
        if category not in before:
            # Utility enabled since the previous state: this reading is its starting point
            continue
        consumption = now[category] - before[category]
        if consumption < 0:
            raise ValidationError(f"Negative {category.value} consumption {consumption}")
        unit_price = rate.get_unit_price(category)
        if unit_price is None:
            raise ValidationError(f"Rate {rate.id} has no {category.value} price")
        lines.append(
            price_line(
                ChargeKind.METERED,
                consumption,
                unit_price,
                rate.get_vat_rate(category),
                category=category,
                previous_value=before[category],
                current_value=now[category],
            )
        )
    return lines


def _subscription_lines(current: State, rate: Rate) -> list[InvoiceLineDraft]:
    lines = []
    measured = current.get_readings()
    for category in SUBSCRIBED:
        fee = rate.get_subscription(category)
        if category in measured and fee is not None:
            lines.append(
                price_line(
                    ChargeKind.SUBSCRIPTION,
                    Decimal("1"),
                    fee,
                    rate.get_vat_rate(category),
                    category=category,
                )
            )
    return lines


def compute_invoice(current: State, previous: State, rate: Rate) -> InvoiceDraft:
    """Bill ``current`` against its predecessor ``previous`` with ``rate``.

    Only utilities read in both states are metered. Raises ValidationError
    when the states are not an ordered pair of the same rent, when ``rate``
    is not the rate recorded on ``current``, or when any utility cannot be
    priced.
    """
    if current.rent_id != previous.rent_id:
        raise ValidationError("States belong to different rents")
    if previous.sequence >= current.sequence:
        raise ValidationError("Previous state must precede the billed state")
    if current.is_initial:
        raise ValidationError("The initial state cannot be billed")
    if current.rate_id is not None and current.rate_id != rate.id:
        raise ValidationError(f"State {current.id} was captured under rate {current.rate_id}")

    lines = _metered_lines(current, previous, rate)
    lines.extend(_subscription_lines(current, rate))
    lines.append(
        price_line(ChargeKind.LANDLORD_RENT, Decimal("1"), rate.landlord_rent, rate.landlord_rent_vat)
    )
    lines.append(
        price_line(ChargeKind.HOUSING_RENT, Decimal("1"), rate.housing_rent, rate.housing_rent_vat)
    )

    total_net = sum((line.net_amount for line in lines), Decimal("0"))
    total_vat = sum((line.vat_amount for line in lines), Decimal("0"))
    return InvoiceDraft(
        rent_id=current.rent_id,
        state_id=current.id,
        previous_state_id=previous.id,
        rate_id=rate.id,
        lines=tuple(lines),
        total_net=total_net,
        total_vat=total_vat,
        total_gross=total_net + total_vat,
    )
