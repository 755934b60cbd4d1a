"""Conversion of byte counts into display strings."""

from pyfree.models import Config, Unit


def format_fixed(value: int, unit: Unit) -> str:
    """Express ``value`` bytes in ``unit``, dropping the fractional part."""
    if value < 0:
        raise ValueError(f"byte count must not be negative: {value}")
    return str(value >> unit)


def human_readable_value(value: int) -> str:
    """
    Format ``value`` bytes using the largest unit that keeps the integer part >= 1.

    E.g. 10240 gives "10.0K" and 1536 gives "1.5K". The decimal part is
    truncated, not rounded, so the displayed value is always "at least X".
    """
    if value < 0:
        raise ValueError(f"byte count must not be negative: {value}")

    shift = Unit.B
    for unit in Unit:
        if value >> unit == 0:
            break
        shift = unit

    decimal = 0
    if shift > 0:
        remainder = value - (value >> shift << shift)
        # thousandths of the unit, keeping only the leading digit
        decimal = (remainder >> (shift - 10)) * 1000 // 1024 // 100
    return f"{value >> shift}.{decimal}{shift.letter}"


def format_value(value: int, config: Config) -> str:
    """Format a byte count according to the active display mode."""
    if config.human:
        return human_readable_value(value)
    # explicit units print neither a suffix nor a decimal part
    return format_fixed(value, config.unit)
