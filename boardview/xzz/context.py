"""Read-only state shared by the element parsers of one load."""
import itertools
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

from ..pcb.models import Net
from .diagnostics import DiagnosticReadings
from .reader import ByteReader


@dataclass(frozen=True)
class ParseContext:
    """
    Everything a parser may consult besides its own payload.

    Built once per load after the net table and diagnostic block are
    decoded, then passed explicitly to each parse step.
    """
    reader: ByteReader
    nets: Mapping[int, Net] = field(default_factory=lambda: MappingProxyType({}))
    readings: DiagnosticReadings = field(default_factory=DiagnosticReadings)
    # Source of numbers for synthesised reference designators
    unnamed_counter: Iterator[int] = field(default_factory=itertools.count)

    def next_unnamed(self) -> int:
        return next(self.unnamed_counter)

    def net_name(self, net_id: int) -> str:
        net = self.nets.get(net_id)
        return net.name if net else ""
