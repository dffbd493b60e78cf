"""Pure billing calculator and usage rules.

Nothing in this module touches the database: every input is passed in,
which is what makes a saved bill a snapshot of the rates and readings it
was computed from.
"""

from decimal import ROUND_HALF_UP, Decimal

from roombill.core.exceptions import BillingConfigurationError
from roombill.models.enums import CalculationType
from roombill.schemas.billing import BillLineItems, MeteredUnits, RoomPricing
from roombill.schemas.setting import RateSettings

CENT = Decimal("0.01")
RATE_STEP = Decimal("0.0001")
ZERO = Decimal("0")


def to_money(value: Decimal) -> Decimal:
    """Quantize an amount to the currency's natural precision."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_rate(value: Decimal) -> Decimal:
    """Quantize a per-unit rate to the precision bills store it with."""
    return value.quantize(RATE_STEP, rounding=ROUND_HALF_UP)


def compute_usage(previous: Decimal | None, current: Decimal | None) -> Decimal | None:
    """Usage of one utility for a period.

    Returns None while the meter has not been read, i.e. when the current
    value is missing or 0. A current value below the previous one (meter
    replaced or misread) yields a negative usage, which is not clamped.
    """
    if current is None or current <= 0:
        return None
    return current - (previous or ZERO)


def _parse_calculation_type(value: str, utility: str, room_id: int | None) -> CalculationType:
    try:
        return CalculationType(value)
    except ValueError:
        raise BillingConfigurationError(
            f"Unknown {utility} calculation type '{value}'",
            room_id=room_id,
        ) from None


def _utility_charge(
    calculation_type: CalculationType,
    units: Decimal,
    rate: Decimal,
    fixed_amount: Decimal | None,
) -> tuple[Decimal, Decimal | None]:
    """Return (amount, rate applied) for one utility."""
    if calculation_type == CalculationType.FIXED:
        return to_money(fixed_amount or ZERO), None
    return to_money(units * rate), rate


def compute_bill(
    room: RoomPricing,
    rates: RateSettings,
    usage: MeteredUnits | None = None,
    other_amount: Decimal = ZERO,
) -> BillLineItems:
    """Compute the line items and total of one room's bill.

    Fixed-mode utilities cost their fixed amount whatever the usage;
    unit-mode utilities cost units x rate. A missing room price counts as
    0. The total is the exact sum of the quantized line items.

    Raises:
        BillingConfigurationError: If a calculation type is not recognized.
    """
    water_type = _parse_calculation_type(room.water_calculation_type, "water", room.room_id)
    electric_type = _parse_calculation_type(
        room.electric_calculation_type, "electric", room.room_id
    )
    usage = usage or MeteredUnits()

    warnings: list[str] = []
    if water_type == CalculationType.UNIT and usage.water_units < 0:
        warnings.append("negative water usage")
    if electric_type == CalculationType.UNIT and usage.electric_units < 0:
        warnings.append("negative electric usage")

    water_amount, water_rate = _utility_charge(
        water_type, usage.water_units, to_rate(rates.water_rate), room.water_fixed_amount
    )
    electric_amount, electric_rate = _utility_charge(
        electric_type,
        usage.electric_units,
        to_rate(rates.electric_rate),
        room.electric_fixed_amount,
    )
    room_price = to_money(room.room_price or ZERO)
    trash_fee = to_money(rates.trash_fee)
    other_amount = to_money(other_amount)

    return BillLineItems(
        room_price=room_price,
        water_type=water_type.value,
        water_units=usage.water_units,
        water_rate=water_rate,
        water_amount=water_amount,
        electric_type=electric_type.value,
        electric_units=usage.electric_units,
        electric_rate=electric_rate,
        electric_amount=electric_amount,
        trash_fee=trash_fee,
        other_amount=other_amount,
        total_amount=room_price + water_amount + electric_amount + trash_fee + other_amount,
        warnings=warnings,
    )


def line_item_total(
    room_price: Decimal,
    water_amount: Decimal,
    electric_amount: Decimal,
    trash_fee: Decimal,
    other_amount: Decimal,
) -> Decimal:
    """Total of manually entered line items."""
    return to_money(room_price + water_amount + electric_amount + trash_fee + other_amount)
