"""A bounded buffer of generated audio for waveform display."""

from __future__ import annotations

from collections.abc import Callable, Sequence

DEFAULT_CAPACITY_SECONDS = 10.0

View = Callable[[], None]


class WaveformBuffer:
    """Keeps the first ``capacity`` seconds of audio per channel and notifies views."""

    def __init__(self, capacity: float = DEFAULT_CAPACITY_SECONDS) -> None:
        self.capacity = capacity
        self.sample_rate = 44100.0
        self.channels = 0
        self.waveform: list[list[int]] = []
        self.capacity_samples = 0
        self.redraw_rate = int(self.sample_rate)
        self.count = 0
        self._views: set[View] = set()

    def start(self, channels: int, sample_rate: float) -> None:
        """Empty the buffer and prepare to collect audio."""
        self.channels = channels
        self.sample_rate = sample_rate
        self.waveform = [[] for _ in range(channels)]
        self.redraw_rate = int(sample_rate)
        self.capacity_samples = int(sample_rate * self.capacity)
        self.count = 0

    def add_frame(self, frame: Sequence[int]) -> None:
        """Append one frame, unless the buffer is already full."""
        if self.count >= self.capacity_samples:
            return
        for channel, samples in enumerate(self.waveform):
            samples.append(frame[channel])
        self.count += 1
        if self.count % self.redraw_rate == 0 or self.count == self.capacity_samples:
            self.update_all_views()

    def end(self) -> None:
        """Finish collecting and notify views."""
        self.update_all_views()

    def add_view(self, view: View) -> None:
        """Register a callable to be invoked when the waveform changes."""
        self._views.add(view)

    def remove_view(self, view: View) -> None:
        self._views.discard(view)

    def update_all_views(self) -> None:
        for view in list(self._views):
            view()