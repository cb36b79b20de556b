"""Basic audio generator nodes: the node base class, a sine wave and an AR envelope."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

DEFAULT_SAMPLE_RATE = 44100.0
DEFAULT_BPM = 120.0


class AudioNode(ABC):
    """A component that produces one stereo frame of audio per call to generate()."""

    def __init__(self, bpm: float = DEFAULT_BPM) -> None:
        self.bpm = bpm
        self.frame: tuple[float, float] = (0.0, 0.0)
        self._sample_rate = DEFAULT_SAMPLE_RATE
        self._sample_period = 1.0 / DEFAULT_SAMPLE_RATE

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

    @abstractmethod
    def start(self) -> None:
        """Prepare the node to generate audio from the beginning."""

    @abstractmethod
    def generate(self) -> bool:
        """Generate one frame into ``self.frame``; return False once finished."""


class SineWave(AudioNode):
    """An endless sine tone."""

    def __init__(self, freq: float = 440.0, amplitude: float = 0.1) -> None:
        super().__init__()
        self.freq = freq
        self.amplitude = amplitude
        self._phase = 0.0

    def start(self) -> None:
        self._phase = 0.0

    def generate(self) -> bool:
        sample = self.amplitude * math.sin(self._phase * 2 * math.pi)
        self.frame = (sample, sample)
        self._phase += self.freq * self.sample_period
        return True


class AttackRelease(AudioNode):
    """A linear attack/release envelope applied to another node for a fixed duration."""

    def __init__(
        self,
        source: AudioNode,
        duration: float = 0.1,
        attack: float = 0.05,
        release: float = 0.05,
    ) -> None:
        super().__init__()
        self.source = source
        self.duration = duration
        self.attack = attack
        self.release = release
        self._time = 0.0

    def start(self) -> None:
        self.source.sample_rate = self.sample_rate
        self.source.start()
        self._time = 0.0

    def _gain(self) -> float:
        if self._time < self.attack:
            return self._time / self.attack
        if self._time > self.duration - self.release:
            return (self.duration - self._time) / self.release
        return 1.0

    def generate(self) -> bool:
        self.source.generate()
        gain = self._gain()
        left, right = self.source.frame
        self.frame = (left * gain, right * gain)
        self._time += self.sample_period
        return self._time < self.duration