"""Readers producing raw memory statistics (field name -> bytes)."""

import logging
import os
from collections.abc import Iterable

import psutil

from pyfree.errors import SourceReadError
from pyfree.models import RawStats

logger = logging.getLogger(__name__)

PROC_MEMINFO = "/proc/meminfo"


def parse_meminfo(lines: Iterable[str]) -> RawStats:
    """
    Parse lines in the /proc/meminfo format.

    Each line looks like ``MemTotal:       16318480 kB``. Values with a ``kB``
    suffix are converted to bytes; values without a suffix (e.g. HugePages_Total)
    are kept as they are.

    Raises:
        SourceReadError: If a line is malformed.
    """
    stats: RawStats = {}
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        key, sep, rest = line.partition(":")
        fields = rest.split()
        if not sep or not key or not 1 <= len(fields) <= 2:
            raise SourceReadError(f"line {lineno}: malformed meminfo entry {line!r}")
        try:
            value = int(fields[0])
        except ValueError:
            raise SourceReadError(f"line {lineno}: invalid value for {key!r}: {fields[0]!r}") from None
        if value < 0:
            raise SourceReadError(f"line {lineno}: negative value for {key!r}")
        if len(fields) == 2:
            if fields[1] != "kB":
                raise SourceReadError(f"line {lineno}: unknown unit {fields[1]!r} for {key!r}")
            value *= 1024
        stats[key.strip()] = value
    return stats


class ProcMeminfoSource:
    """Read memory statistics from a meminfo-format file."""

    def __init__(self, path: str = PROC_MEMINFO) -> None:
        """Initialize the source for the meminfo file at ``path``."""
        self._path = path

    @property
    def path(self) -> str:
        """Get the file the statistics are read from."""
        return self._path

    def read(self) -> RawStats:
        """Read and parse the file.

        Raises:
            SourceReadError: If the file cannot be read or is malformed.
        """
        try:
            with open(self._path, encoding="ascii") as f:
                stats = parse_meminfo(f)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"cannot read {self._path}: {e}") from e
        logger.debug("Read %d fields from %s", len(stats), self._path)
        return stats


class PsutilSource:
    """
    Read memory statistics through psutil.

    psutil's attribute names are mapped onto the /proc/meminfo names. Attributes
    the platform does not provide are left out, so the report fails on them
    instead of showing a made-up zero.
    """

    VIRTUAL_FIELDS = {
        "total": "MemTotal",
        "free": "MemFree",
        "shared": "Shmem",
        "cached": "Cached",
        "buffers": "Buffers",
        "available": "MemAvailable",
    }
    SWAP_FIELDS = {
        "total": "SwapTotal",
        "free": "SwapFree",
    }

    def read(self) -> RawStats:
        """Query psutil and map its fields onto the meminfo names."""
        try:
            virt = psutil.virtual_memory()
            swap = psutil.swap_memory()
        except (psutil.Error, OSError, RuntimeError) as e:
            raise SourceReadError(f"cannot query memory statistics: {e}") from e

        stats: RawStats = {}
        for attrs, sample in ((self.VIRTUAL_FIELDS, virt), (self.SWAP_FIELDS, swap)):
            for attr, name in attrs.items():
                value = getattr(sample, attr, None)
                if value is not None:
                    stats[name] = int(value)
        logger.debug("Read %d fields from psutil", len(stats))
        return stats


def default_source() -> ProcMeminfoSource | PsutilSource:
    """Pick the live memory statistics source for this host."""
    if os.path.exists(PROC_MEMINFO):
        return ProcMeminfoSource(PROC_MEMINFO)
    return PsutilSource()
