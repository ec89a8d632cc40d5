"""Meter state ledger: the ordered, append-only readings of each rent.

Every write to a rent's ledger (append, confirmation, correction, deletion,
invoice issue) locks the rent row and then bumps ``Rent.ledger_version`` with a
compare-and-swap update. The winner of two concurrent writers commits, the
loser gets a ConflictError and nothing it did is persisted.
"""

import logging
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.orm import Session

from rentledger.core.database import commit_or_conflict
from rentledger.core.errors import ConflictError, NotFoundError, ValidationError
from rentledger.models.enums import UtilityCategory
from rentledger.models.invoice import Invoice
from rentledger.models.photo import Photo
from rentledger.models.property import Property
from rentledger.models.rent import Rent
from rentledger.models.state import State
from rentledger.services.property import get_property
from rentledger.services.rate_catalog import get_active_rate

logger = logging.getLogger(__name__)

Readings = dict[UtilityCategory, Decimal]


def lock_rent(db: Session, rent_id: int) -> Rent:
    """Load a rent for a ledger write, row-locked where the database supports it."""
    rent = (
        db.query(Rent)
        .filter(Rent.id == rent_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not rent:
        raise NotFoundError(f"Rent {rent_id} not found")
    return rent


def claim_ledger(db: Session, rent: Rent) -> int:
    """Advance the rent's ledger version, failing if another writer got there first.

    Returns the new version. On conflict the session is rolled back.
    """
    expected = rent.ledger_version
    result = db.execute(
        update(Rent)
        .where(Rent.id == rent.id, Rent.ledger_version == expected)
        .values(ledger_version=expected + 1)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Ledger of rent %s changed concurrently (expected version %s)", rent.id, expected)
        raise ConflictError(f"Ledger of rent {rent.id} was modified concurrently")
    return expected + 1


def _check_utilities(db_property: Property, readings: Readings) -> None:
    applicable = db_property.get_utilities()
    missing = [c.value for c in UtilityCategory if c in applicable and c not in readings]
    extra = [c.value for c in UtilityCategory if c in readings and c not in applicable]
    if missing:
        raise ValidationError(f"Missing readings for {', '.join(missing)}")
    if extra:
        raise ValidationError(f"Property {db_property.id} has no {', '.join(extra)}")


def _check_monotonic(previous: State, readings: Readings) -> None:
    # A utility added to the property after the previous state has nothing to compare to
    before = previous.get_readings()
    for category, value in readings.items():
        if category in before and value < before[category]:
            raise ValidationError(
                f"{category.value} reading {value} is lower than previous reading {before[category]}"
            )


def _find_initial(db: Session, rent_id: int) -> State | None:
    return (
        db.query(State)
        .filter(State.rent_id == rent_id, State.is_initial.is_(True))
        .first()
    )


def _find_latest(db: Session, rent_id: int) -> State | None:
    return (
        db.query(State)
        .filter(State.rent_id == rent_id)
        .order_by(State.sequence.desc())
        .first()
    )


def _find_before(db: Session, state: State) -> State | None:
    return (
        db.query(State)
        .filter(State.rent_id == state.rent_id, State.sequence < state.sequence)
        .order_by(State.sequence.desc())
        .first()
    )


def _find_invoice(db: Session, state_id: int) -> Invoice | None:
    return db.query(Invoice).filter(Invoice.state_id == state_id).first()


def add_state(db: Session, rent: Rent, readings: Readings, is_initial: bool) -> State:
    """Validate and stage a new state on a locked rent without committing."""
    if rent.is_deleted:
        raise ValidationError(f"Rent {rent.id} is deleted")

    db_property = get_property(db, rent.property_id)
    _check_utilities(db_property, readings)

    initial = _find_initial(db, rent.id)
    if is_initial and initial:
        raise ValidationError(f"Rent {rent.id} already has an initial state")
    if not is_initial and not initial:
        raise ValidationError(f"Rent {rent.id} has no initial state yet")

    latest = _find_latest(db, rent.id)
    if latest:
        _check_monotonic(latest, readings)

    sequence = claim_ledger(db, rent)
    rate = get_active_rate(db, db_property.id)

    state = State(
        rent_id=rent.id,
        sequence=sequence,
        is_initial=is_initial,
        is_confirmed=is_initial,
        rate_id=rate.id if rate else None,
    )
    state.set_readings(readings)
    db.add(state)
    return state


def append_state(
    db: Session,
    rent_id: int,
    readings: Readings,
    is_initial: bool = False,
) -> State:
    """Append a state to a rent's ledger.

    Raises NotFoundError for an unknown rent, ValidationError when the
    readings break the ledger rules and ConflictError when a concurrent
    writer changed the ledger first.
    """
    rent = lock_rent(db, rent_id)
    try:
        state = add_state(db, rent, readings, is_initial)
    except ValidationError as exc:
        db.rollback()
        logger.warning("Rejected state for rent %s: %s", rent_id, exc.message)
        raise
    commit_or_conflict(db, f"Ledger of rent {rent_id} was modified concurrently")
    db.refresh(state)
    logger.info("Appended state %s (sequence %s) to rent %s", state.id, state.sequence, rent_id)
    return state


def get_state(db: Session, state_id: int) -> State:
    """Get a state by ID."""
    state = db.query(State).filter(State.id == state_id).first()
    if not state:
        raise NotFoundError(f"State {state_id} not found")
    return state


def previous_state(db: Session, state_id: int) -> State:
    """Return the state immediately before the given one in its rent's ledger.

    The initial state has no predecessor, so it raises NotFoundError.
    """
    state = get_state(db, state_id)
    if state.is_initial:
        raise NotFoundError(f"State {state_id} is the initial state")
    previous = _find_before(db, state)
    if not previous:
        raise NotFoundError(f"State {state_id} has no previous state")
    return previous


def get_states_for_rent(db: Session, rent_id: int) -> list[State]:
    """All states of a rent in ledger order."""
    return (
        db.query(State)
        .filter(State.rent_id == rent_id)
        .order_by(State.sequence)
        .all()
    )


def get_latest_state(db: Session, rent_id: int) -> State:
    """The most recently appended state of a rent."""
    state = _find_latest(db, rent_id)
    if not state:
        raise NotFoundError(f"Rent {rent_id} has no states")
    return state


def get_unconfirmed_states_for_rent(db: Session, rent_id: int) -> list[State]:
    return (
        db.query(State)
        .filter(State.rent_id == rent_id, State.is_confirmed.is_(False))
        .order_by(State.sequence)
        .all()
    )


def get_unconfirmed_states_for_landlord(db: Session, landlord_id: int) -> list[State]:
    """Unconfirmed states across the visible rents of a landlord."""
    return (
        db.query(State)
        .join(Rent, Rent.id == State.rent_id)
        .filter(
            Rent.landlord_id == landlord_id,
            Rent.is_deleted.is_(False),
            State.is_confirmed.is_(False),
        )
        .order_by(State.rent_id, State.sequence)
        .all()
    )


def confirm_state(db: Session, state_id: int) -> State:
    """Mark a state's readings as checked by the landlord.

    Takes the rent lock and advances its ledger version like every other
    ledger write, so a concurrent correction makes it fail with ConflictError.
    """
    state = get_state(db, state_id)
    rent = lock_rent(db, state.rent_id)
    db.refresh(state)
    if state.is_confirmed:
        return state

    claim_ledger(db, rent)
    state.is_confirmed = True
    commit_or_conflict(db, f"Ledger of rent {rent.id} was modified concurrently")
    db.refresh(state)
    logger.info("Confirmed state %s", state_id)
    return state


def correct_state(db: Session, state_id: int, readings: Readings) -> State:
    """Replace the readings of the latest state of a rent.

    Only the latest state can be corrected and only until it is invoiced.
    A corrected non-initial state has to be confirmed again.
    """
    state = get_state(db, state_id)
    rent = lock_rent(db, state.rent_id)
    try:
        if rent.is_deleted:
            raise ValidationError(f"Rent {rent.id} is deleted")
        latest = _find_latest(db, rent.id)
        if latest is None or latest.id != state.id:
            raise ValidationError(f"State {state_id} is not the latest state of rent {rent.id}")
        if _find_invoice(db, state.id):
            raise ValidationError(f"State {state_id} is already invoiced")
        _check_utilities(get_property(db, rent.property_id), readings)
        previous = _find_before(db, state)
        if previous:
            _check_monotonic(previous, readings)
    except ValidationError as exc:
        db.rollback()
        logger.warning("Rejected correction of state %s: %s", state_id, exc.message)
        raise

    claim_ledger(db, rent)
    state.set_readings(readings)
    if not state.is_initial:
        state.is_confirmed = False
    commit_or_conflict(db, f"Ledger of rent {rent.id} was modified concurrently")
    db.refresh(state)
    logger.info("Corrected state %s of rent %s", state_id, rent.id)
    return state


def delete_state(db: Session, state_id: int) -> None:
    """Remove the latest non-initial state with its photo and undistributed invoice."""
    state = get_state(db, state_id)
    rent = lock_rent(db, state.rent_id)
    invoice = _find_invoice(db, state.id)
    try:
        if state.is_initial:
            raise ValidationError("The initial state cannot be deleted")
        latest = _find_latest(db, rent.id)
        if latest is None or latest.id != state.id:
            raise ValidationError(f"State {state_id} is not the latest state of rent {rent.id}")
        if invoice and invoice.is_distributed:
            raise ValidationError(f"Invoice of state {state_id} was already distributed")
    except ValidationError as exc:
        db.rollback()
        logger.warning("Rejected deletion of state %s: %s", state_id, exc.message)
        raise

    claim_ledger(db, rent)
    if invoice:
        db.delete(invoice)
    photo = db.query(Photo).filter(Photo.state_id == state.id).first()
    if photo:
        db.delete(photo)
    db.flush()
    db.delete(state)
    commit_or_conflict(db, f"Ledger of rent {rent.id} was modified concurrently")
    logger.info("Deleted state %s of rent %s", state_id, rent.id)
