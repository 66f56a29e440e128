import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")

# Currency symbol, thousands separators and whitespace users paste in
_NOISE = re.compile(r"[₹,\s]")


def quantize(value) -> Decimal:
    """Round to two places; -0.00 comes back as 0.00."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP) + ZERO


def parse_amount(value, field: str = "amount") -> Decimal:
    """
    Turn user input into a non-negative two-place Decimal.
    Accepts Decimal/int/str ("₹1,50,000.50"); floats go through str()
    so 0.1 stays 0.10.
    """
    if value is None or value == "":
        raise ValidationError({field: "This field is required."})
    if isinstance(value, bool):
        raise ValidationError({field: f"'{value}' is not a valid amount."})
    if isinstance(value, float):
        value = str(value)
    raw = _NOISE.sub("", value) if isinstance(value, str) else value
    try:
        amount = Decimal(raw)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: f"'{value}' is not a valid amount."})
    if not amount.is_finite():
        raise ValidationError({field: f"'{value}' is not a valid amount."})
    if amount < 0:
        raise ValidationError({field: "Amount cannot be negative."})
    return quantize(amount)


def format_inr(amount) -> str:
    """Render with Indian digit grouping: 1234567.5 -> ₹12,34,567.50"""
    amount = quantize(amount)
    sign = "-" if amount < 0 else ""
    units, _, paise = f"{abs(amount):.2f}".partition(".")
    if len(units) > 3:
        head, tail = units[:-3], units[-3:]
        groups = []
        # lakhs, crores...: pairs of digits above the last three
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        units = ",".join(groups + [tail])
    return f"{sign}₹{units}.{paise}"
