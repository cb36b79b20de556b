"""Audio effects that transform stereo frames: chorus, flange and noise gate."""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from collections.abc import Sequence

Frame = tuple[float, float]

FLANGE_BUFFER_SIZE = 200000
FLANGE_FEEDBACK = 0.99


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _resized(buffer: list[float], size: int) -> list[float]:
    return buffer[:size] + [0.0] * (size - len(buffer))


class Chorus:
    """Mixes each frame with a delayed copy of the input; output is clamped to [-1, 1]."""

    MAX_DELAY = 2.0

    def __init__(self, sample_rate: float = 44100.0) -> None:
        self.delay = 0.0
        self.dry = 0.0
        self.wet = 0.0
        self.mod_range = 0.0
        self.mod_rate = 0.0
        self._write = 0
        self._left: list[float] = []
        self._right: list[float] = []
        self._sample_rate = 0.0
        self.sample_rate = sample_rate

    @property
    def sample_rate(self) -> float:
        """Samples per second; the delay line holds two seconds."""
        return self._sample_rate

    @sample_rate.setter
    def sample_rate(self, rate: float) -> None:
        self._sample_rate = rate
        size = int(rate * self.MAX_DELAY)
        self._left = _resized(self._left, size)
        self._right = _resized(self._right, size)

    def process(self, frame: Sequence[float]) -> Frame:
        modulation = math.sin(2.0 * math.pi * self.mod_rate)
        delay = _clamp(self.delay + self.mod_range * modulation, 0.0, self.MAX_DELAY)

        left, right = frame[0], frame[1]
        size = len(self._left)
        self._write = (self._write + 1) % size
        self._left[self._write] = left
        self._right[self._write] = right

        read = (self._write + size - int(delay * self._sample_rate)) % size
        wet_left = (left + self._left[read]) / 2.0
        wet_right = (right + self._right[read]) / 2.0

        out_left = wet_left * self.wet + left * self.dry
        out_right = wet_right * self.wet + right * self.dry
        return (_clamp(out_left, -1.0, 1.0), _clamp(out_right, -1.0, 1.0))

    def load_xml(self, element: ET.Element) -> None:
        """Read delay, wet, dry, range and rate attributes."""
        for name, value in element.attrib.items():
            if name == "delay":
                self.delay = _clamp(float(value), 0.0, self.MAX_DELAY)
            elif name == "wet":
                self.wet = _clamp(float(value), 0.0, 1.0)
            elif name == "dry":
                self.dry = _clamp(float(value), 0.0, 1.0)
            elif name == "range":
                self.mod_range = float(value)
            elif name == "rate":
                self.mod_rate = float(value)


class Flange:
    """A delay effect with output feedback; output is not clamped."""

    def __init__(self, sample_rate: float = 44100.0) -> None:
        self.sample_rate = sample_rate
        self.delay = 0.0
        self.dry = 0.0
        self.wet = 0.0
        self.mod_range = 0.0
        self.mod_rate = 0.0
        self.level = 1.0
        self._write = 0
        self._left = [0.0] * FLANGE_BUFFER_SIZE
        self._right = [0.0] * FLANGE_BUFFER_SIZE
        self._out_left = [0.0] * FLANGE_BUFFER_SIZE
        self._out_right = [0.0] * FLANGE_BUFFER_SIZE

    def process(self, frame: Sequence[float]) -> Frame:
        modulation = math.sin(2 * math.pi * self.mod_rate)
        delay = max(0.0, self.delay + self.mod_range * modulation)

        left, right = frame[0], frame[1]
        size = len(self._left)
        self._write = (self._write + 1) % size
        self._left[self._write] = left
        self._right[self._write] = right

        read = (self._write + size - int(delay * self.sample_rate + 0.5)) % size
        wet_left = (left + self._left[read] + self._out_left[read] * self.level) / 3
        wet_right = (right + self._right[read] + self._out_right[read] * self.level) / 3

        out_left = wet_left * self.wet + left * self.dry
        out_right = wet_right * self.wet + right * self.dry

        self._out_left[self._write] = out_left * FLANGE_FEEDBACK
        self._out_right[self._write] = out_right * FLANGE_FEEDBACK
        return (out_left, out_right)

    def load_xml(self, element: ET.Element) -> None:
        """Read delay, wet, dry, range, rate and level attributes."""
        for name, value in element.attrib.items():
            if name == "delay":
                self.delay = float(value)
            elif name == "wet":
                self.wet = float(value)
            elif name == "dry":
                self.dry = float(value)
            elif name == "range":
                self.mod_range = float(value)
            elif name == "rate":
                self.mod_rate = float(value)
            elif name == "level":
                self.level = float(value)


class NoiseGate:
    """Per-channel gate that closes on quiet input and opens on loud input."""

    def __init__(self) -> None:
        self.threshold = 0.01
        self.dry = 1.0
        self.wet = 0.0
        self.attack = 0.01
        self.release = 0.01
        self._gates = [1.0, 1.0]

    def _gate_channel(self, channel: int, sample: float) -> float:
        if abs(sample) < self.threshold:
            gate = self._gates[channel] - self.release
        else:
            gate = self._gates[channel] + self.attack
        gate = _clamp(gate, 0.0, 1.0)
        self._gates[channel] = gate
        return self.dry * sample + self.wet * sample * gate

    def process(self, frame: Sequence[float]) -> Frame:
        return (self._gate_channel(0, frame[0]), self._gate_channel(1, frame[1]))

    def load_xml(self, element: ET.Element) -> None:
        """Read threshold (as a whole number), wet and dry attributes."""
        for name, value in element.attrib.items():
            if name == "threshold":
                self.threshold = float(round(float(value)))
            elif name == "wet":
                self.wet = float(value)
            elif name == "dry":
                self.dry = float(value)