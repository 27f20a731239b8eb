"""Half-up rounding for displayed forecast figures.

The dashboard rounds ties away from zero (1500.5 W -> 1501 W); builtin
round() would send them to the even neighbour instead.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value, ndigits=0):
    """Round ``value`` to ``ndigits`` decimals with ties going up.

    Returns an int when ``ndigits`` is 0, otherwise a float.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if ndigits == 0:
        return int(rounded)
    return float(rounded)
