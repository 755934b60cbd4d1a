"""Derivation of the memory and swap records from raw statistics."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pyfree.errors import MissingFieldError
from pyfree.models import MainMemInfo, MemInfo, RawStats, SwapInfo

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class FieldProfile:
    """Names of the raw statistics each record field is taken from."""

    mem_total: str = "MemTotal"
    mem_free: str = "MemFree"
    shared: str = "Shmem"
    cached: str = "Cached"
    buffers: str = "Buffers"
    available: str = "MemAvailable"
    swap_total: str = "SwapTotal"
    swap_free: str = "SwapFree"

    @property
    def main_fields(self) -> tuple[str, ...]:
        """Raw fields required for the main memory record."""
        return (
            self.mem_total,
            self.mem_free,
            self.buffers,
            self.cached,
            self.shared,
            self.available,
        )

    @property
    def swap_fields(self) -> tuple[str, ...]:
        """Raw fields required for the swap record."""
        return (self.swap_total, self.swap_free)


LINUX_PROFILE = FieldProfile()


def missing_required_fields(raw: RawStats, fields: Iterable[str]) -> str | None:
    """Return the first of ``fields`` absent from ``raw``, or None."""
    for field in fields:
        if field not in raw:
            logger.debug("Missing field '%s'", field)
            return field
    return None


def _require(raw: RawStats, fields: Iterable[str]) -> None:
    missing = missing_required_fields(raw, fields)
    if missing is not None:
        raise MissingFieldError(missing)


def get_main_mem_info(raw: RawStats, profile: FieldProfile = LINUX_PROFILE) -> MainMemInfo:
    """
    Build the main memory record.

    Used memory is total minus free, buffers and cached, clamped at zero when
    the statistics are inconsistent.

    Raises:
        MissingFieldError: If a required field is absent.
    """
    _require(raw, profile.main_fields)
    total = raw[profile.mem_total]
    free = raw[profile.mem_free]
    buffers = raw[profile.buffers]
    cached = raw[profile.cached]
    return MainMemInfo(
        total=total,
        used=max(total - free - buffers - cached, 0),
        free=free,
        shared=raw[profile.shared],
        cached=cached,
        buffers=buffers,
        available=raw[profile.available],
    )


def get_swap_info(raw: RawStats, profile: FieldProfile = LINUX_PROFILE) -> SwapInfo:
    """Build the swap record; used is total minus free, clamped at zero."""
    _require(raw, profile.swap_fields)
    total = raw[profile.swap_total]
    free = raw[profile.swap_free]
    return SwapInfo(total=total, used=max(total - free, 0), free=free)


def derive(raw: RawStats, profile: FieldProfile = LINUX_PROFILE) -> MemInfo:
    """Build both records from one set of raw statistics."""
    return MemInfo(mem=get_main_mem_info(raw, profile), swap=get_swap_info(raw, profile))
