from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

# Enough significant digits for any uint256 amount with up to 77 decimals
PRECISION = 160

MAX_UINT256 = 2**256 - 1


def parse_decimal(amount: str | int | float | Decimal) -> Decimal:
    if isinstance(amount, Decimal):
        value = amount
    else:
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation:
            raise ValueError(f"not a number: {amount!r}") from None

    if not value.is_finite():
        raise ValueError(f"not a finite number: {amount!r}")

    return value


def to_wei(amount: str | int | float | Decimal, decimals: int) -> tuple[int, bool]:
    """
    Convert a human readable amount to the token's smallest unit.

    The scaled value is truncated toward zero, never rounded up. Returns the
    integer amount and a flag telling whether non-zero digits were dropped.
    """
    value = parse_decimal(amount)
    if value < 0:
        raise ValueError(f"amount cannot be negative: {amount}")
    if decimals < 0:
        raise ValueError(f"decimals cannot be negative: {decimals}")

    with localcontext() as ctx:
        # scaleb only moves the exponent, it is exact while every input digit fits
        ctx.prec = max(PRECISION, len(value.as_tuple().digits) + 1)
        scaled = value.scaleb(decimals)
        whole = scaled.to_integral_value(rounding=ROUND_DOWN)

    return int(whole), whole != scaled


def from_wei(amount: int, decimals: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(PRECISION, len(str(abs(amount))) + 1)
        return Decimal(amount).scaleb(-decimals)
