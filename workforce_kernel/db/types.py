"""
Module: workforce_kernel.db.types
Responsibility: Annotated column aliases and the rounding helpers every money
    and hours value goes through.  Centralizes precision so that models,
    engines and services agree on scale.
Architecture position: Kernel > DB.  Imported by engines, modules and ORM
    models.  MUST NOT import from outer layers.

Invariants enforced:
    - Money is 4 decimal places, hours 2 decimal places, both HALF_UP.
    - No floats for money or hours anywhere.

Failure modes:
    - decimal.InvalidOperation on non-numeric input to to_decimal().
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated

from sqlalchemy import Numeric, String

# Monetary amount, 4 decimal places
Money = Annotated[Decimal, Numeric(18, 4)]

# Hour quantities, 2 decimal places
Hours = Annotated[Decimal, Numeric(9, 2)]

# Degrees with enough precision for ~1 cm on the ground
Degrees = Annotated[Decimal, Numeric(12, 8)]

# Short identifier strings (employee numbers, project codes, status codes)
ShortCode = Annotated[str, String(50)]

# Free text for notes and reasons
LongText = Annotated[str, String(4000)]


MONEY_DECIMAL_PLACES = 4
HOURS_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO_MONEY = Decimal("0.0000")
ZERO_HOURS = Decimal("0.00")


def to_decimal(value) -> Decimal:
    """Coerce int/str/float/Decimal to Decimal (floats via their repr)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary amount to the given scale.

    Preconditions: value is a Decimal.
    Postconditions: Returns value quantized to ``decimal_places`` (default 4).
    """
    quantizer = Decimal(10) ** -decimal_places
    return value.quantize(quantizer, rounding=rounding)


def round_hours(value: Decimal, rounding: str = DEFAULT_ROUNDING) -> Decimal:
    """Round an hour quantity to 2 decimal places."""
    return value.quantize(Decimal("0.01"), rounding=rounding)
