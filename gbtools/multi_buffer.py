"""Sets of blip buffers mixed into mono or stereo output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from gbtools.blip_buffer import DEFAULT_LENGTH, BlipBuffer, BlipReader


def _clamp16(s: int) -> int:
    """Convert to a signed 16-bit sample, saturating on overflow."""
    value = s & 0xFFFF
    if value & 0x8000:
        value -= 0x10000
    if value == s:
        return s
    value = (0x7FFF - (s >> 24)) & 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


@dataclass(frozen=True)
class Channel:
    """The center, left and right buffers one channel writes into."""

    center: Optional[BlipBuffer] = None
    left: Optional[BlipBuffer] = None
    right: Optional[BlipBuffer] = None


class MultiBuffer:
    """One or more blip buffers mapped to channels of center/left/right outputs."""

    def __init__(self, samples_per_frame: int, buffers: Iterable[BlipBuffer] = ()) -> None:
        self._samples_per_frame = samples_per_frame
        self._buffers = tuple(buffers)
        self._channel = Channel()
        self._sample_rate = 0
        self._length = 0
        self._channels_changed_count = 1

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def length(self) -> int:
        """Length of the buffers in milliseconds."""
        return self._length

    @property
    def samples_per_frame(self) -> int:
        """1 for mono output, 2 for stereo."""
        return self._samples_per_frame

    @property
    def channels_changed_count(self) -> int:
        return self._channels_changed_count

    def channels_changed(self) -> None:
        self._channels_changed_count += 1

    def set_sample_rate(self, rate: int, msec: int = DEFAULT_LENGTH) -> None:
        for buf in self._buffers:
            buf.set_sample_rate(rate, msec)
        if self._buffers:
            rate = self._buffers[0].sample_rate
            msec = self._buffers[0].length
        self._sample_rate = rate
        self._length = msec

    def set_clock_rate(self, rate: int) -> None:
        for buf in self._buffers:
            buf.clock_rate = rate

    def set_bass_freq(self, freq: int) -> None:
        for buf in self._buffers:
            buf.bass_freq = freq

    def clear(self) -> None:
        for buf in self._buffers:
            buf.clear()

    def channel(self, index: int) -> Channel:
        return self._channel

    def end_frame(self, time: int, added_stereo: bool = True) -> None:
        for buf in self._buffers:
            buf.end_frame(time)

    def samples_avail(self) -> int:
        if not self._buffers:
            return 0
        return self._buffers[0].samples_avail() * self._samples_per_frame

    def read_samples(self, count: int) -> list[int]:
        if not self._buffers:
            return []
        return self._buffers[0].read_samples(count)


class MonoBuffer(MultiBuffer):
    """A single buffer shared by every channel, read out as mono samples."""

    def __init__(self) -> None:
        self._buf = BlipBuffer()
        super().__init__(1, (self._buf,))
        self._channel = Channel(center=self._buf, left=self._buf, right=self._buf)

    @property
    def center(self) -> BlipBuffer:
        return self._buf


class StereoBuffer(MultiBuffer):
    """Center, left and right buffers read out as interleaved stereo pairs."""

    def __init__(self) -> None:
        self._bufs = (BlipBuffer(), BlipBuffer(), BlipBuffer())
        super().__init__(2, self._bufs)
        self._channel = Channel(center=self._bufs[0], left=self._bufs[1], right=self._bufs[2])
        self.stereo_added = False
        self.was_stereo = False

    @property
    def center(self) -> BlipBuffer:
        return self._bufs[0]

    @property
    def left(self) -> BlipBuffer:
        return self._bufs[1]

    @property
    def right(self) -> BlipBuffer:
        return self._bufs[2]

    def clear(self) -> None:
        self.stereo_added = False
        self.was_stereo = False
        super().clear()

    def end_frame(self, time: int, added_stereo: bool = True) -> None:
        super().end_frame(time, added_stereo)
        self.stereo_added |= added_stereo

    def read_samples(self, count: int) -> list[int]:
        """Read up to ``count`` interleaved samples; ``count`` must be even."""
        if count < 0 or count & 1:
            raise ValueError("sample count must be even and non-negative")
        center, left, right = self._bufs
        pairs = min(count // 2, center.samples_avail())
        if not pairs:
            return []
        if self.stereo_added or self.was_stereo:
            out = self._mix_stereo(pairs)
            for buf in self._bufs:
                buf.remove_samples(pairs)
        else:
            out = self._mix_mono(pairs)
            center.remove_samples(pairs)
            left.remove_silence(pairs)
            right.remove_silence(pairs)

        if not center.samples_avail():
            self.was_stereo = self.stereo_added
            self.stereo_added = False
        return out

    def _mix_stereo(self, count: int) -> list[int]:
        center_buf, left_buf, right_buf = self._bufs
        left, right, center = BlipReader(), BlipReader(), BlipReader()
        left.begin(left_buf)
        right.begin(right_buf)
        bass = center.begin(center_buf)
        out: list[int] = []
        for _ in range(count):
            c = center.read()
            out.append(_clamp16(c + left.read()))
            out.append(_clamp16(c + right.read()))
            center.next(bass)
            left.next(bass)
            right.next(bass)
        center.end(center_buf)
        right.end(right_buf)
        left.end(left_buf)
        return out

    def _mix_mono(self, count: int) -> list[int]:
        reader = BlipReader()
        bass = reader.begin(self._bufs[0])
        out: list[int] = []
        for _ in range(count):
            s = _clamp16(reader.read())
            reader.next(bass)
            out.extend((s, s))
        reader.end(self._bufs[0])
        return out


class SilentBuffer(MultiBuffer):
    """Produces no samples; for when no sound is wanted."""

    def __init__(self) -> None:
        super().__init__(1)