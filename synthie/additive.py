"""Additive synthesis: a harmonic wave table and an enveloped instrument built on it."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from itertools import takewhile

from .instrument import Instrument
from .nodes import DEFAULT_BPM, AudioNode
from .note import Note
from .notes import note_to_frequency

SAMPLE_MIN = -32768
SAMPLE_MAX = 32767
HARMONIC_COUNT = 8
HARMONIC_LIMIT = 22050.0

_NUMBER_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def clamp_sample(value: float) -> int:
    """Clamp a sample to the signed 16-bit range, truncating toward zero."""
    if value < SAMPLE_MIN:
        return SAMPLE_MIN
    if value > SAMPLE_MAX:
        return SAMPLE_MAX
    return int(value)


def _leading_float(text: str) -> float:
    """Read the numeric prefix of a string; 0.0 when there is none."""
    match = _NUMBER_PREFIX.match(text)
    return float(match.group()) if match else 0.0


def _space_fields(text: str, count: int) -> list[float]:
    """Split on single spaces and read up to ``count`` numbers, padding with zeros."""
    items = text.split(" ")
    if items and items[-1] == "":
        items.pop()
    values = [_leading_float(item) for item in items[:count]]
    values.extend([0.0] * (count - len(values)))
    return values


class AdditiveSineWave(AudioNode):
    """A precomputed sum of up to eight harmonics, with optional vibrato."""

    def __init__(self) -> None:
        super().__init__()
        self.freq = 440.0
        self.amplitude = 1000.0
        self.duration = 0.0
        self.vibrato_rate = 0.0
        self.vibrato_freq = 0.0
        self._harmonics = [1.0] + [0.0] * (HARMONIC_COUNT - 1)
        self.table: list[int] = []
        self._index = 0

    @property
    def harmonics(self) -> list[float]:
        """Relative amplitudes of harmonics 1 to 8."""
        return list(self._harmonics)

    @harmonics.setter
    def harmonics(self, values: Sequence[float]) -> None:
        chosen = [float(v) for v in values][:HARMONIC_COUNT]
        chosen.extend([0.0] * (HARMONIC_COUNT - len(chosen)))
        self._harmonics = chosen

    def start(self) -> None:
        self._index = 0
        self.generate_wave_table()

    def generate(self) -> bool:
        if self._index >= len(self.table):
            self.frame = (0.0, 0.0)
            return False
        value = float(self.table[self._index])
        self._index += 1
        self.frame = (value, value)
        return self._index < len(self.table)

    def generate_wave_table(self) -> list[int]:
        """Fill and return the table of 16-bit samples for the whole duration."""
        rate = self.sample_rate
        sine_phase = 0.0
        vibrato_phase = 0.0
        table: list[int] = []
        for _ in range(int(self.duration * rate)):
            audible = takewhile(
                lambda pair: pair[0] * self.freq <= HARMONIC_LIMIT,
                enumerate(self._harmonics, start=1),
            )
            sample = 0.0
            for n, amp in audible:
                sample += self.amplitude * amp * math.sin(n * sine_phase)

            vibrato_phase += (2 * math.pi * self.vibrato_rate) / rate
            vibrato = self.vibrato_freq * math.sin(vibrato_phase)
            sine_phase += (2 * math.pi * (self.freq + vibrato)) / rate

            table.append(clamp_sample(sample))
        self.table = table
        return table


class AdditiveSynth(Instrument):
    """An additive wave shaped by an ADSR envelope and optional cross-fades."""

    def __init__(self, bpm: float = DEFAULT_BPM) -> None:
        super().__init__(bpm)
        self.sine_wave = AdditiveSineWave()
        self.duration = 0.0
        self.cross_fade_in = 0.0
        self.cross_fade_out = 0.0
        self.attack = 0.0
        self.decay = 0.0
        self.sustain = 1.0
        self.release = 0.0
        self._time = 0.0

    def start(self) -> None:
        self.sine_wave.sample_rate = self.sample_rate
        self.sine_wave.duration = self.duration
        self.sine_wave.start()
        self._time = 0.0

    def _fade_factor(self) -> float:
        t = self._time
        if t < self.cross_fade_in:
            return t / self.cross_fade_in
        if self.cross_fade_out > 0 and t > self.duration - self.cross_fade_out:
            return (self.duration - t) / self.cross_fade_out
        return 1.0

    def _envelope_factor(self) -> float:
        t = self._time
        fade = self._fade_factor()
        if t < self.attack:
            return t / self.attack
        if t < self.decay:
            progress = (t - self.attack) / (self.decay - self.attack)
            return fade * (1.0 - progress * (1.0 - self.sustain))
        if t > self.duration - self.release and self.release != 0:
            progress = (t - (self.duration - self.release)) / self.release
            return fade * (1.0 - progress * (1.0 - self.sustain))
        return fade * self.sustain

    def generate(self) -> bool:
        self.sine_wave.generate()
        factor = self._envelope_factor()
        left, right = self.sine_wave.frame
        self.frame = (left * factor, right * factor)
        self._time += self.sample_period
        return self._time < self.duration

    def set_note(self, note: Note) -> None:
        for name, value in note.attributes.items():
            if name == "duration":
                self.duration = float(value)
            elif name == "note":
                self.sine_wave.freq = note_to_frequency(value)
            elif name == "amplitudes":
                self.sine_wave.harmonics = _space_fields(value, HARMONIC_COUNT)
            elif name == "crossFadeIn":
                self.attack = float(value) * self.duration
            elif name == "crossFadeOut":
                self.release = float(value) * self.duration
            elif name == "ADSR":
                attack, decay, sustain, release = _space_fields(value, 4)
                self.attack = attack * self.duration
                self.decay = self.attack + decay * self.duration
                self.sustain = sustain
                self.release = release * self.duration
            elif name == "vibrato":
                rate, depth = _space_fields(value, 2)
                self.sine_wave.vibrato_rate = rate
                self.sine_wave.vibrato_freq = depth