"""Reading and writing PCM WAVE files one frame at a time."""

from __future__ import annotations

import os
import struct
from collections.abc import Iterator, Sequence
from typing import BinaryIO

PCM_FORMAT = 1
_FMT_CHUNK_SIZE = 16


class WaveError(Exception):
    """Raised when a WAVE file cannot be opened, parsed or written."""


def _bytes_per_sample(sample_size: int) -> int:
    return (sample_size + 7) // 8


def _sample_struct(sample_size: int) -> struct.Struct:
    # 16-bit samples are little-endian signed; anything else is read as one signed byte.
    return struct.Struct("<h" if sample_size == 16 else "<b")


class WaveReader:
    """Reads frames of audio from a PCM WAVE file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        try:
            self._file: BinaryIO = open(path, "rb")
        except OSError as exc:
            raise WaveError(f"Unable to open file {os.fspath(path)} for reading.") from exc

        self.channels = 0
        self.sample_rate = 0.0
        self.sample_size = 0
        self.num_sample_frames = 0
        self.current_frame = 0
        self._sound_start = 0
        self._closed = False
        try:
            self._parse_headers()
        except Exception:
            self._file.close()
            self._closed = True
            raise

    def _parse_headers(self) -> None:
        riff = self._file.read(12)
        if len(riff) < 12 or riff[:4] != b"RIFF" or riff[8:12] != b"WAVE":
            raise WaveError("File is not a valid Wave file")

        have_format = False
        while True:
            header = self._file.read(8)
            if len(header) < 8:
                break
            chunk_id = header[:4]
            (chunk_size,) = struct.unpack("<I", header[4:])
            next_offset = self._file.tell() + chunk_size

            if chunk_id == b"fmt ":
                body = self._file.read(_FMT_CHUNK_SIZE)
                if len(body) < _FMT_CHUNK_SIZE:
                    raise WaveError("Error reading Wave file.")
                fmt_type, channels, rate, _byte_rate, _block, size = struct.unpack(
                    "<HHIIHH", body
                )
                if fmt_type != PCM_FORMAT:
                    raise WaveError("Only PCM WAVE files are supported")
                self.channels = channels
                self.sample_rate = float(rate)
                self.sample_size = size
                have_format = True
            elif chunk_id == b"data":
                if not have_format or self.channels == 0:
                    raise WaveError("Wave file has no format chunk before its sound data.")
                self._sound_start = self._file.tell()
                frame_bytes = self.channels * _bytes_per_sample(self.sample_size)
                self.num_sample_frames = chunk_size // frame_bytes

            self._file.seek(next_offset)

        if self._sound_start == 0:
            raise WaveError("Unable to find sound data in Wave file.")

        self._sample = _sample_struct(self.sample_size)
        self._file.seek(self._sound_start)
        self.current_frame = 0

    @property
    def _frame_bytes(self) -> int:
        return self.channels * self._sample.size

    def read_frame(self) -> tuple[int, ...] | None:
        """Return the next frame, one integer per channel, or None at the end of the file."""
        data = self._file.read(self._frame_bytes)
        if len(data) < self._frame_bytes:
            return None
        self.current_frame += 1
        return tuple(value for (value,) in self._sample.iter_unpack(data))

    def __iter__(self) -> Iterator[tuple[int, ...]]:
        while (frame := self.read_frame()) is not None:
            yield frame

    def seek_frame(self, frame: int) -> None:
        """Position the reader at the given frame."""
        if frame < 0:
            raise WaveError("Cannot seek to a negative frame.")
        self.current_frame = frame
        self._file.seek(self._sound_start + frame * self._frame_bytes)

    def rewind(self) -> None:
        """Return to the first frame."""
        self.seek_frame(0)

    def close(self) -> None:
        if not self._closed:
            self._file.close()
            self._closed = True

    def __enter__(self) -> WaveReader:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class WaveWriter:
    """Writes frames of audio to a PCM WAVE file.

    Headers are written with the first frame, so the format attributes may be
    changed until then.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        channels: int = 1,
        sample_size: int = 16,
        sample_rate: float = 44100.0,
    ) -> None:
        try:
            self._file: BinaryIO = open(path, "wb")
        except OSError as exc:
            raise WaveError(f"Unable to open file {os.fspath(path)} for writing.") from exc
        self.channels = channels
        self.sample_size = sample_size
        self.sample_rate = sample_rate
        self.num_sample_frames = 0
        self._started = False
        self._open = True
        self._length_location = 0

    def _write_headers(self) -> None:
        self._started = True
        bytes_per = _bytes_per_sample(self.sample_size)
        rate = int(self.sample_rate)
        try:
            self._file.write(b"RIFF" + struct.pack("<I", 0) + b"WAVE")
            self._file.write(b"fmt " + struct.pack("<I", _FMT_CHUNK_SIZE))
            self._file.write(
                struct.pack(
                    "<HHIIHH",
                    PCM_FORMAT,
                    self.channels & 0xFFFF,
                    rate & 0xFFFFFFFF,
                    (rate * self.channels * bytes_per) & 0xFFFFFFFF,
                    (self.channels * bytes_per) & 0xFFFF,
                    self.sample_size & 0xFFFF,
                )
            )
            self._length_location = self._file.tell()
            self._file.write(b"data" + struct.pack("<I", 0))
        except OSError as exc:
            raise WaveError("Error writing sound file header.") from exc
        self.num_sample_frames = 0

    def write_frame(self, frame: Sequence[int]) -> None:
        """Write one frame, taking one sample per channel from ``frame``."""
        if not self._open:
            raise WaveError("Cannot write to a closed Wave file.")
        if not self._started:
            self._write_headers()
        samples = frame[: self.channels]
        if len(samples) < self.channels:
            raise WaveError(f"A frame needs {self.channels} samples.")
        if self.sample_size == 16:
            data = b"".join(struct.pack("<H", int(s) & 0xFFFF) for s in samples)
        else:
            data = bytes(int(s) & 0xFF for s in samples)
        try:
            self._file.write(data)
        except OSError as exc:
            raise WaveError("Failure writing Wave file") from exc
        self.num_sample_frames += 1

    def close(self) -> None:
        """Fill in the chunk lengths and close the file."""
        if not self._open:
            return
        if not self._started:
            self._write_headers()
        self._open = False
        try:
            file_length = self._file.tell()
            self._file.seek(self._length_location + 4)
            self._file.write(struct.pack("<I", file_length - self._length_location - 8))
            self._file.seek(4)
            self._file.write(struct.pack("<I", file_length - 8))
        except OSError as exc:
            raise WaveError("Failure writing Wave file") from exc
        finally:
            self._file.close()

    def __enter__(self) -> WaveWriter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()