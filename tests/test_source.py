"""Tests for the memory statistics sources."""

from collections import namedtuple

import psutil
import pytest

from pyfree import source
from pyfree.errors import SourceReadError
from pyfree.source import ProcMeminfoSource, PsutilSource, default_source, parse_meminfo

MEMINFO = """\
MemTotal:       16318480 kB
MemFree:         1074932 kB
MemAvailable:    9912344 kB
Buffers:          570532 kB
Cached:          8133356 kB
SwapCached:            0 kB
Shmem:            844772 kB
SwapTotal:       2097148 kB
SwapFree:        2097148 kB
HugePages_Total:       0
Hugepagesize:       2048 kB
"""


class TestParseMeminfo:
    """Tests for parse_meminfo."""

    def test_kb_converted_to_bytes(self):
        stats = parse_meminfo(MEMINFO.splitlines())
        assert stats["MemTotal"] == 16318480 * 1024
        assert stats["SwapFree"] == 2097148 * 1024
        assert stats["Hugepagesize"] == 2048 * 1024

    def test_value_without_unit_kept(self):
        stats = parse_meminfo(["HugePages_Total:       7"])
        assert stats == {"HugePages_Total": 7}

    def test_blank_lines_skipped(self):
        assert parse_meminfo(["", "MemFree: 1 kB", "  "]) == {"MemFree": 1024}

    @pytest.mark.parametrize(
        "line",
        [
            "MemTotal 16318480 kB",
            "MemTotal:",
            "MemTotal: lots kB",
            "MemTotal: 10 MB",
            "MemTotal: -5 kB",
            ": 10 kB",
        ],
    )
    def test_malformed_lines(self, line):
        with pytest.raises(SourceReadError):
            parse_meminfo([line])


class TestProcMeminfoSource:
    """Tests for ProcMeminfoSource."""

    def test_read_file(self, tmp_path):
        path = tmp_path / "meminfo"
        path.write_text(MEMINFO)
        stats = ProcMeminfoSource(str(path)).read()
        assert stats["MemAvailable"] == 9912344 * 1024

    def test_missing_file(self, tmp_path):
        path = tmp_path / "nope"
        with pytest.raises(SourceReadError, match="nope"):
            ProcMeminfoSource(str(path)).read()

    def test_default_path(self):
        assert ProcMeminfoSource().path == "/proc/meminfo"


svmem = namedtuple("svmem", "total available percent used free active inactive buffers cached shared slab")
sswap = namedtuple("sswap", "total used free percent sin sout")


class TestPsutilSource:
    """Tests for PsutilSource."""

    def test_maps_psutil_fields(self, monkeypatch):
        monkeypatch.setattr(
            psutil,
            "virtual_memory",
            lambda: svmem(16000, 9000, 43.0, 5500, 8000, 0, 0, 500, 2000, 100, 0),
        )
        monkeypatch.setattr(psutil, "swap_memory", lambda: sswap(2000, 0, 2000, 0.0, 0, 0))
        assert PsutilSource().read() == {
            "MemTotal": 16000,
            "MemFree": 8000,
            "Shmem": 100,
            "Cached": 2000,
            "Buffers": 500,
            "MemAvailable": 9000,
            "SwapTotal": 2000,
            "SwapFree": 2000,
        }

    def test_platform_without_buffers(self, monkeypatch):
        """Test fields the platform lacks are left out rather than zeroed."""
        darwin = namedtuple("svmem", "total available percent used free active inactive wired")
        monkeypatch.setattr(psutil, "virtual_memory", lambda: darwin(16000, 9000, 43.0, 5500, 8000, 0, 0, 0))
        monkeypatch.setattr(psutil, "swap_memory", lambda: sswap(2000, 0, 2000, 0.0, 0, 0))
        stats = PsutilSource().read()
        assert "Buffers" not in stats
        assert "Shmem" not in stats
        assert stats["MemAvailable"] == 9000

    def test_psutil_failure(self, monkeypatch):
        def fail():
            raise psutil.AccessDenied()

        monkeypatch.setattr(psutil, "virtual_memory", fail)
        with pytest.raises(SourceReadError):
            PsutilSource().read()


def test_default_source_prefers_proc(monkeypatch, tmp_path):
    path = tmp_path / "meminfo"
    path.write_text(MEMINFO)
    monkeypatch.setattr(source, "PROC_MEMINFO", str(path))
    assert isinstance(default_source(), ProcMeminfoSource)


def test_default_source_falls_back_to_psutil(monkeypatch, tmp_path):
    monkeypatch.setattr(source, "PROC_MEMINFO", str(tmp_path / "missing"))
    assert isinstance(default_source(), PsutilSource)
