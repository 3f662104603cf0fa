"""Optional trailing section with per-pin or per-net diode readings.

Two textual layouts follow the marker:

- pin readings, one per record: ``\\n=<voltage>=<part>(<pin>)``
- net readings, ``\\r\\n`` separated: ``<net>=<value>``, ending on an
  empty line
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .cipher import decode_text, find_diagnostic_marker
from .constants import DIAGNOSTIC_MARKER, DIAGNOSTIC_SKIP, NET_READING_KEY

log = logging.getLogger(__name__)

PIN_LAYOUT_LEAD = 0x0A
CRLF = b"\r\n"


class ReadingLayout(str, Enum):
    NONE = "none"
    PIN = "pin"  # Keyed by part then pin name
    NET = "net"  # Keyed by net name then NET_READING_KEY


@dataclass(frozen=True)
class DiagnosticReadings:
    """Parsed reading table; empty when the file has no diagnostic block."""
    layout: ReadingLayout = ReadingLayout.NONE
    table: dict[str, dict[str, str]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.table)

    def lookup(self, name: str, key: str) -> Optional[str]:
        return self.table.get(name, {}).get(key)

    def for_pin(self, reference: str, pin_name: str, net_name: str) -> str:
        """Reading attached to a pin, or an empty string."""
        if self.layout is ReadingLayout.PIN and reference and pin_name:
            return self.lookup(reference, pin_name) or ""
        if self.layout is ReadingLayout.NET and net_name:
            return self.lookup(net_name, NET_READING_KEY) or ""
        return ""


def _read_until(data: bytes, pos: int, stop: int) -> tuple[Optional[str], int]:
    """Decode bytes up to the stop byte; (None, pos) if it is never found."""
    end = data.find(bytes([stop]), pos)
    if end < 0:
        return None, pos
    return decode_text(data[pos:end]), end + 1


def _parse_pin_layout(data: bytes, pos: int) -> dict[str, dict[str, str]]:
    table: dict[str, dict[str, str]] = {}
    while pos < len(data) and data[pos] == PIN_LAYOUT_LEAD:
        pos += 1
        if pos >= len(data) or data[pos] != ord("="):
            break
        pos += 1

        voltage, pos = _read_until(data, pos, ord("="))
        if voltage is None:
            break
        part, pos = _read_until(data, pos, ord("("))
        if part is None:
            break
        pin, pos = _read_until(data, pos, ord(")"))
        if pin is None:
            break
        table.setdefault(part, {})[pin] = voltage
    return table


def _parse_net_layout(data: bytes, pos: int) -> dict[str, dict[str, str]]:
    table: dict[str, dict[str, str]] = {}
    if data[pos] != 0x0D:
        pos += 2

    while data[pos:pos + 2] == CRLF:
        pos += 2
        if pos >= len(data) or data[pos:pos + 2] == CRLF:
            break

        net, pos = _read_until(data, pos, ord("="))
        if net is None:
            break
        end = data.find(b"\r", pos)
        if end < 0:
            break
        table.setdefault(net, {})[NET_READING_KEY] = decode_text(data[pos:end])
        pos = end
    return table


def parse_diagnostics(data: bytes) -> DiagnosticReadings:
    """
    Locate and decode the diagnostic block of a decrypted file.

    A missing marker, or a marker with nothing after it, yields an empty
    table. Malformed records end the scan; earlier records are kept.
    """
    marker = find_diagnostic_marker(data)
    if marker < 0:
        return DiagnosticReadings()

    pos = marker + len(DIAGNOSTIC_MARKER) + DIAGNOSTIC_SKIP
    if pos >= len(data):
        log.warning("Diagnostic marker at %#x has no payload", marker)
        return DiagnosticReadings()

    if data[pos] == PIN_LAYOUT_LEAD:
        readings = DiagnosticReadings(ReadingLayout.PIN, _parse_pin_layout(data, pos))
    else:
        readings = DiagnosticReadings(ReadingLayout.NET, _parse_net_layout(data, pos))

    log.debug("Parsed %d diagnostic entries (%s layout)", len(readings.table), readings.layout.value)
    return readings
