"""The score-driven synthesizer that schedules notes and mixes instruments."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from collections.abc import Iterator

from .additive import AdditiveSynth
from .effects import Chorus, Flange, NoiseGate
from .instrument import Instrument, ToneInstrument
from .note import Effect, Note

DEFAULT_BEATS_PER_MEASURE = 4
DEFAULT_SECONDS_PER_BEAT = 0.5
DEFAULT_BPM = 120.0

_EFFECT_FLAGS = {"noisegate": Effect.GATE, "chorus": Effect.CHORUS, "flange": Effect.FLANGE}


def _as_int(value: str) -> int:
    return round(float(value))


class Synthesizer:
    """Plays the notes of a loaded score, one frame per call to generate()."""

    def __init__(self, sample_rate: float = 44100.0, channels: int = 2) -> None:
        if channels < 1:
            raise ValueError("a synthesizer needs at least one channel")
        self.channels = channels
        self._sample_rate = sample_rate
        self._sample_period = 1.0 / sample_rate
        self.bpm = DEFAULT_BPM
        self.beats_per_measure = DEFAULT_BEATS_PER_MEASURE
        self.seconds_per_beat = DEFAULT_SECONDS_PER_BEAT

        self.notes: list[Note] = []
        self.instruments: list[Instrument] = []
        self.frame: tuple[float, ...] = (0.0,) * channels
        self.time = 0.0
        self._current_note = 0
        self._measure = 0
        self._beat = 0.0

        self.enabled_effects: set[Effect] = set()
        self.noise_gate = NoiseGate()
        self.chorus = Chorus(sample_rate)
        self.flange = Flange(sample_rate)

    @property
    def sample_rate(self) -> float:
        """Samples per second."""
        return self._sample_rate

    @sample_rate.setter
    def sample_rate(self, rate: float) -> None:
        self._sample_rate = rate
        self._sample_period = 1.0 / rate

    @property
    def sample_period(self) -> float:
        """Seconds per sample."""
        return self._sample_period

    def clear(self) -> None:
        """Drop every loaded note and playing instrument."""
        self.instruments.clear()
        self.notes.clear()

    def open_score(self, path: str | os.PathLike[str]) -> None:
        """Load a score file, replacing any notes already loaded."""
        self.clear()
        root = ET.parse(path).getroot()
        self._load_document(root)

    def load_score_text(self, text: str) -> None:
        """Load a score from XML text, replacing any notes already loaded."""
        self.clear()
        root = ET.fromstring(text)
        self._load_document(root)

    def _load_document(self, root: ET.Element) -> None:
        if root.tag == "score":
            self._load_score(root)
        self.notes.sort()

    def _load_score(self, element: ET.Element) -> None:
        for name, value in element.attrib.items():
            if name == "bpm":
                self.bpm = float(value)
                self.seconds_per_beat = 1 / (self.bpm / 60)
            elif name == "beatspermeasure":
                self.beats_per_measure = _as_int(value)

        for child in element:
            if child.tag == "instrument":
                self._load_instrument(child)
            if child.tag == "effect":
                self._load_effect(child)

    def _load_instrument(self, element: ET.Element) -> None:
        instrument = ""
        for name, value in element.attrib.items():
            if name == "instrument":
                instrument = value
            elif name in _EFFECT_FLAGS and _as_int(value) == 1:
                self.enabled_effects.add(_EFFECT_FLAGS[name])

        for child in element:
            if child.tag == "note":
                self._load_note(child, instrument)
            if child.tag == "effect":
                self._load_effect(child)

    def _load_note(self, element: ET.Element, instrument: str) -> None:
        note = Note.from_xml(element, instrument)
        note.effects.update(self.enabled_effects)
        self.notes.append(note)

    def _load_effect(self, element: ET.Element) -> None:
        targets = {"NoiseGate": self.noise_gate, "Chorus": self.chorus, "Flange": self.flange}
        for value in element.attrib.values():
            target = targets.get(value)
            if target is not None and len(element):
                target.load_xml(element[0])

    def start(self) -> None:
        """Rewind to the start of the score."""
        self.instruments.clear()
        self._current_note = 0
        self._measure = 0
        self._beat = 0.0
        self.time = 0.0

    def _create_instrument(self, note: Note) -> Instrument | None:
        if note.instrument == "ToneInstrument":
            return ToneInstrument(self.bpm)
        if note.instrument == "AdditiveSynth":
            return AdditiveSynth()
        return None

    def _due_notes(self) -> Iterator[Note]:
        while self._current_note < len(self.notes):
            note = self.notes[self._current_note]
            if note.measure > self._measure:
                return
            if note.measure == self._measure and note.beat > self._beat:
                return
            self._current_note += 1
            yield note

    def _start_due_notes(self) -> None:
        for note in self._due_notes():
            instrument = self._create_instrument(note)
            if instrument is None:
                continue
            instrument.sample_rate = self.sample_rate
            instrument.set_note(note)
            for effect in self.enabled_effects:
                instrument.add_effect(effect)
            instrument.start()
            self.instruments.append(instrument)

    def _apply_effects(self, instrument: Instrument, mix: list[float]) -> None:
        count = instrument.effect_count
        processors = (
            (Effect.GATE, self.noise_gate),
            (Effect.CHORUS, self.chorus),
            (Effect.FLANGE, self.flange),
        )
        combined = [0.0, 0.0]
        for effect, processor in processors:
            if instrument.has_effect(effect):
                left, right = processor.process(mix)
                combined[0] += left / count
                combined[1] += right / count
        mix[0], mix[1] = combined

    def generate(self) -> bool:
        """Produce one frame into ``self.frame``; return False when the score is finished."""
        self._start_due_notes()

        mix = [0.0] * max(self.channels, 2)
        still_playing: list[Instrument] = []
        for instrument in self.instruments:
            if not instrument.generate():
                continue
            still_playing.append(instrument)
            for channel, value in enumerate(instrument.frame[: self.channels]):
                mix[channel] += value
            if instrument.effect_count > 0:
                self._apply_effects(instrument, mix)
        self.instruments = still_playing
        self.frame = tuple(mix[: self.channels])

        self.time += self.sample_period
        self._beat += self.sample_period / self.seconds_per_beat
        if self._beat > self.beats_per_measure:
            self._beat -= self.beats_per_measure
            self._measure += 1

        return bool(self.instruments) or self._current_note < len(self.notes)

    def frames(self) -> Iterator[tuple[float, ...]]:
        """Start from the beginning and yield frames until the score is finished."""
        self.start()
        while self.generate():
            yield self.frame