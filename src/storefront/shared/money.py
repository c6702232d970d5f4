"""Money helpers. Amounts are persisted as integer minor units (cents).

Persisting cents keeps cart and order totals exact; ``Decimal`` is used only
at the API boundary.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

CENT = Decimal("0.01")


def to_cents(amount) -> int:
    """Convert a decimal-like amount (``"19.99"``, ``19.99``, ``Decimal``) to cents."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError({"price": [f"Invalid monetary amount: {amount!r}"]}) from None
    if not value.is_finite():
        raise ValidationError({"price": [f"Invalid monetary amount: {amount!r}"]})
    return int((value / CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents) -> Decimal:
    return (Decimal(int(cents or 0)) * CENT).quantize(CENT)


def format_cents(cents) -> str:
    """Render cents as a two-decimal string, e.g. ``20000`` -> ``"200.00"``."""
    return f"{from_cents(cents):.2f}"
