"""Instruments: audio nodes configured from a note."""

from __future__ import annotations

from abc import abstractmethod

from .nodes import DEFAULT_BPM, AttackRelease, AudioNode, SineWave
from .note import Effect, Note
from .notes import note_to_frequency

SECONDS_PER_MINUTE = 60.0


class Instrument(AudioNode):
    """An audio node that plays a single note and may carry effects."""

    def __init__(self, bpm: float = DEFAULT_BPM) -> None:
        super().__init__(bpm)
        self.effects: set[Effect] = set()

    @abstractmethod
    def set_note(self, note: Note) -> None:
        """Configure the instrument from a note's attributes."""

    def has_effect(self, effect: Effect) -> bool:
        return effect in self.effects

    def add_effect(self, effect: Effect) -> None:
        self.effects.add(effect)

    @property
    def effect_count(self) -> int:
        """Number of distinct effects enabled."""
        return len(self.effects)


class ToneInstrument(Instrument):
    """A sine tone shaped by an attack/release envelope; note durations are in beats."""

    def __init__(self, bpm: float = DEFAULT_BPM) -> None:
        super().__init__(bpm)
        self.sine_wave = SineWave()
        self.envelope = AttackRelease(self.sine_wave)
        self._time = 0.0

    def start(self) -> None:
        self.envelope.sample_rate = self.sample_rate
        self.envelope.start()
        self._time = 0.0

    def generate(self) -> bool:
        valid = self.envelope.generate()
        self.frame = self.envelope.frame
        self._time += self.sample_period
        return valid

    def set_note(self, note: Note) -> None:
        for name, value in note.attributes.items():
            if name == "duration":
                self.envelope.duration = float(value) * (SECONDS_PER_MINUTE / self.bpm)
            elif name == "note":
                self.sine_wave.freq = note_to_frequency(value)