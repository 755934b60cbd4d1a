"""Rendering of memory information as JSON or as a text table."""

import json

from pyfree.models import Config, MemInfo
from pyfree.units import format_value

MEM_ROW = "{:<7} {:>11} {:>11} {:>11} {:>11} {:>11} {:>11}\n"
SWAP_ROW = "{:<7} {:>11} {:>11} {:>11}\n"
HEADER = MEM_ROW.format("", "total", "used", "free", "shared", "buff/cache", "available")


def render_json(info: MemInfo) -> str:
    """Serialize raw byte counts; units never apply to JSON output."""
    return json.dumps(info.to_dict(), separators=(",", ":")) + "\n"


def render_table(info: MemInfo, config: Config) -> str:
    """Render the fixed-width table, converting each value per ``config``."""
    mem, swap = info.mem, info.swap

    def fmt(value: int) -> str:
        return format_value(value, config)

    return (
        HEADER
        + MEM_ROW.format(
            "Mem:",
            fmt(mem.total),
            fmt(mem.used),
            fmt(mem.free),
            fmt(mem.shared),
            fmt(mem.buffers + mem.cached),
            fmt(mem.available),
        )
        + SWAP_ROW.format("Swap:", fmt(swap.total), fmt(swap.used), fmt(swap.free))
    )


def render(info: MemInfo, config: Config) -> str:
    """Render ``info`` in the output format selected by ``config``."""
    if config.json:
        return render_json(info)
    return render_table(info, config)
