"""Data models for pyfree."""

from dataclasses import asdict, dataclass
from enum import IntEnum

# Raw memory statistics: field name -> byte count.
RawStats = dict[str, int]


class Unit(IntEnum):
    """Display units, valued by the bit shift that converts bytes into them."""

    B = 0
    KB = 10
    MB = 20
    GB = 30
    TB = 40

    @property
    def letter(self) -> str:
        """Single-letter suffix used by the human-readable form."""
        return "BKMGT"[self.value // 10]


@dataclass(slots=True, frozen=True)
class Config:
    """Resolved display configuration.

    When ``human`` is set the ``unit`` is not used for formatting.
    """

    unit: Unit = Unit.KB
    human: bool = False
    json: bool = False


@dataclass(slots=True, frozen=True)
class MainMemInfo:
    """Physical memory usage, all values in bytes."""

    total: int
    used: int
    free: int
    shared: int
    cached: int
    buffers: int
    available: int


@dataclass(slots=True, frozen=True)
class SwapInfo:
    """Swap space usage, all values in bytes."""

    total: int
    used: int
    free: int


@dataclass(slots=True, frozen=True)
class MemInfo:
    """Main memory and swap space information, shaped like the JSON output."""

    mem: MainMemInfo
    swap: SwapInfo

    def to_dict(self) -> dict[str, dict[str, int]]:
        """Return the records as nested dicts keyed by the JSON field names."""
        return {"mem": asdict(self.mem), "swap": asdict(self.swap)}

    @classmethod
    def from_dict(cls, data: dict[str, dict[str, int]]) -> "MemInfo":
        """Rebuild a MemInfo from the output of to_dict."""
        return cls(mem=MainMemInfo(**data["mem"]), swap=SwapInfo(**data["swap"]))
