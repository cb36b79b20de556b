"""A scheduled note read from a score file."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import IntEnum


class Effect(IntEnum):
    """Effects that may be applied to an instrument's output."""

    GATE = 0
    CHORUS = 1
    FLANGE = 2


@dataclass(eq=False)
class Note:
    """A note to be played by a named instrument at a measure and beat (both from zero)."""

    instrument: str = ""
    measure: int = 0
    beat: float = 0.0
    element: ET.Element | None = field(default=None, repr=False)
    effects: set[Effect] = field(default_factory=set)

    @classmethod
    def from_xml(cls, element: ET.Element, instrument: str) -> Note:
        """Build a note from a ``<note>`` element; measures and beats in the file start at 1."""
        note = cls(instrument=instrument, element=element)
        for name, value in element.attrib.items():
            if name == "measure":
                note.measure = round(float(value)) - 1
            elif name == "beat":
                note.beat = float(value) - 1
        return note

    @property
    def attributes(self) -> dict[str, str]:
        """The attributes of the element this note was read from."""
        return dict(self.element.attrib) if self.element is not None else {}

    def __lt__(self, other: Note) -> bool:
        if self.measure != other.measure:
            return self.measure < other.measure
        return self.beat < other.beat