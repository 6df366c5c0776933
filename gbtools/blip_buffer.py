"""Band-limited sample buffer, its reader and the impulse tables synths use."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Optional

BUFFER_ACCURACY = 16
RES_BITS = 5
MAX_RES = 1 << RES_BITS
WIDEST_IMPULSE = 24
SAMPLE_OFFSET = 0x7F7F
ACCUM_FRACT = 15
DEFAULT_LENGTH = 0
MAX_BUFFER_SIZE = 0x100000

_IMPULSE_BITS = 15
_IMPULSE_AMP = 1 << _IMPULSE_BITS
_IMPULSE_OFFSET = _IMPULSE_AMP // 2
_COUNT_CLOCKS_EXTRA = 2
_COPY_EXTRA = 1
_PI = 3.1415926535897932384626433832795029


def _to_int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _to_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _clamp_sample(s: int) -> int:
    if _to_int16(s) != s:
        return _to_int16(0x7FFF - (s >> 24))
    return s


@dataclass(frozen=True)
class EqualizerParams:
    """Low-pass equalization: treble in dB at 22 kHz, cutoff and sample rate in Hz."""

    treble: float = 0.0
    cutoff: int = 0
    sample_rate: int = 44100


class BlipBuffer:
    """Buffer of 16-bit samples into which band-limited transitions are added."""

    def __init__(self) -> None:
        self._sample_rate = 44100
        self.buffer: list[int] = []
        self._clock_rate = 0
        self.factor = (1 << 64) - 1
        self.offset = 0
        self.buffer_size = 0
        self._length = 0
        self._bass_freq = 16
        self.bass_shift = 0
        self.reader_accum = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def length(self) -> int:
        """Length of the buffer in milliseconds."""
        return self._length

    @property
    def output_latency(self) -> int:
        """Samples of delay from synthesis to samples read out."""
        return WIDEST_IMPULSE // 2

    @property
    def clock_rate(self) -> int:
        return self._clock_rate

    @clock_rate.setter
    def clock_rate(self, rate: int) -> None:
        self.factor = self.clock_rate_factor(rate)
        self._clock_rate = rate

    @property
    def bass_freq(self) -> int:
        return self._bass_freq

    @bass_freq.setter
    def bass_freq(self, freq: int) -> None:
        self._bass_freq = freq
        if freq == 0:
            self.bass_shift = 31
            return
        shift = 1 + math.floor(1.442695041 * math.log(0.124 * self._sample_rate / freq))
        self.bass_shift = min(max(shift, 0), 24)

    def set_sample_rate(self, rate: int, msec: int = DEFAULT_LENGTH) -> None:
        """Set the output rate and length in milliseconds (0 for the largest), then clear."""
        new_size = MAX_BUFFER_SIZE
        if msec != DEFAULT_LENGTH:
            size = (rate * (msec + 1) + 999) // 1000
            if size >= new_size:
                raise ValueError("requested buffer length exceeds limit")
            new_size = size

        if self.buffer_size != new_size:
            self.buffer = []
            self.buffer_size = 0
            self.offset = 0
            self.buffer = [0] * (new_size + WIDEST_IMPULSE + _COUNT_CLOCKS_EXTRA)

        self.buffer_size = new_size
        self._length = new_size * 1000 // rate - 1
        if msec and self._length != msec:
            raise ValueError(f"buffer length {self._length} ms differs from {msec} ms")

        self._sample_rate = rate
        if self._clock_rate:
            self.clock_rate = self._clock_rate
        self.bass_freq = self._bass_freq
        self.clear()

    def clock_rate_factor(self, clock_rate: int) -> int:
        """Fixed-point ratio of sample rate to the given clock rate."""
        factor = math.floor(self._sample_rate / clock_rate * (1 << BUFFER_ACCURACY) + 0.5)
        if factor <= 0:
            raise ValueError("clock rate to sample rate ratio is too large")
        return factor

    def clear(self, entire_buffer: bool = True) -> None:
        """Drop waiting samples and fill the buffer with silence."""
        count = self.buffer_size if entire_buffer else self.samples_avail()
        self.offset = 0
        self.reader_accum = 0
        if self.buffer:
            span = count + WIDEST_IMPULSE
            self.buffer[:span] = [SAMPLE_OFFSET] * span

    def end_frame(self, time: int) -> None:
        """End the current frame after ``time`` clocks and make its samples readable."""
        new_offset = self.offset + time * self.factor
        if new_offset >> BUFFER_ACCURACY > self.buffer_size:
            raise ValueError("frame went past end of buffer")
        self.offset = new_offset

    def samples_avail(self) -> int:
        return self.offset >> BUFFER_ACCURACY

    def _require_buffer(self) -> None:
        if not self.buffer:
            raise RuntimeError("sample rate must be set first")

    def read_samples(self, max_samples: int, stereo: bool = False) -> list[int]:
        """Read and remove up to ``max_samples`` samples.

        With ``stereo`` every sample is followed by a zero slot, ready to be
        interleaved with another channel.
        """
        self._require_buffer()
        count = min(self.samples_avail(), max_samples)
        if count <= 0:
            return []

        bass_shift = self.bass_shift
        accum = self.reader_accum
        out: list[int] = []
        for raw in self.buffer[:count]:
            s = accum >> ACCUM_FRACT
            accum -= accum >> bass_shift
            accum += (raw - SAMPLE_OFFSET) << ACCUM_FRACT
            out.append(_clamp_sample(s))
            if stereo:
                out.append(0)
        self.reader_accum = accum

        self.remove_samples(count)
        return out

    def remove_samples(self, count: int) -> None:
        """Discard ``count`` samples waiting to be read."""
        self._require_buffer()
        if not count:
            return
        self.remove_silence(count)
        remain = self.samples_avail() + WIDEST_IMPULSE + _COPY_EXTRA
        self.buffer[:remain] = self.buffer[count:count + remain]
        self.buffer[remain:remain + count] = [SAMPLE_OFFSET] * count

    def remove_silence(self, count: int) -> None:
        """Advance past ``count`` samples without touching the buffer contents."""
        if count > self.samples_avail():
            raise ValueError("tried to remove more samples than available")
        self.offset -= count << BUFFER_ACCURACY

    def count_samples(self, time: int) -> int:
        """Samples that a frame of ``time`` clocks would make available."""
        return (self.resampled_time(time) >> BUFFER_ACCURACY) - (
            self.offset >> BUFFER_ACCURACY
        )

    def count_clocks(self, count: int) -> int:
        """Clocks needed until ``count`` samples are available (capped at the buffer size)."""
        count = min(count, self.buffer_size)
        return ((count << BUFFER_ACCURACY) - self.offset + (self.factor - 1)) // self.factor

    def mix_samples(self, samples: list[int]) -> None:
        """Add already-sampled signal into the buffer at the current position."""
        if not samples:
            return
        pos = (self.offset >> BUFFER_ACCURACY) + (WIDEST_IMPULSE // 2 - 1)
        prev = 0
        for s in samples:
            self.buffer[pos] = (self.buffer[pos] + s - prev) & 0xFFFF
            prev = s
            pos += 1
        self.buffer[pos] = (self.buffer[pos] - prev) & 0xFFFF

    def resampled_time(self, time: int) -> int:
        return time * self.factor + self.offset

    def resampled_duration(self, time: int) -> int:
        return time * self.factor


class BlipReader:
    """Step-by-step reader of a buffer's samples, sharing its accumulator."""

    def __init__(self) -> None:
        self._data: list[int] = []
        self._pos = 0
        self.accum = 0

    def begin(self, buf: BlipBuffer) -> int:
        """Start reading ``buf``; returns its bass shift."""
        self._data = buf.buffer
        self._pos = 0
        self.accum = buf.reader_accum
        return buf.bass_shift

    def read(self) -> int:
        return self.accum >> ACCUM_FRACT

    def next(self, bass_shift: int = 9) -> None:
        self.accum -= self.accum >> bass_shift
        self.accum += (self._data[self._pos] - SAMPLE_OFFSET) << ACCUM_FRACT
        self._pos += 1

    def end(self, buf: BlipBuffer) -> None:
        buf.reader_accum = self.accum


class BlipImpulse:
    """Band-limited step impulse tables scaled to a volume unit.

    ``impulses`` holds 16-bit entries: the scaled tables first, then the base
    impulse shape generated by :meth:`treble_eq`.
    """

    def __init__(self, width: int, res: int, fine_bits: int = 0) -> None:
        self.width = width
        self.res = res
        self.fine_bits = fine_bits
        self._base = width * res * 2 * (2 if fine_bits else 1)
        self.impulses = [0] * (self._base + width * (res // 2 + 1))
        self.generate = True
        self._volume_unit = -1.0
        self.eq = EqualizerParams()
        self.buf: Optional[BlipBuffer] = None
        self.offset = 0

    def _scale_impulse(self, unit: int) -> list[int]:
        width, res = self.width, self.res
        offset = (unit << _IMPULSE_BITS) - _IMPULSE_OFFSET * unit + (1 << (_IMPULSE_BITS - 1))
        shape = iter(self.impulses[self._base:])
        out: list[int] = []
        for _ in range(res // 2 + 1):
            error = unit
            for _ in range(width):
                a = (next(shape) * unit + offset) >> _IMPULSE_BITS
                error -= a - unit
                out.append(a & 0xFFFF)
            middle = len(out) - width // 2 - 1
            out[middle] = (out[middle] + error) & 0xFFFF

        if res > 2:
            # second half is the mirror image of the first
            rev = len(out) - width - 1
            for _ in range((res // 2 - 1) * width - 1):
                rev -= 1
                out.append(out[rev])
            out.append(unit & 0xFFFF)

        # copy to odd offset
        out.append(unit & 0xFFFF)
        out.extend(out[:res * width - 1])
        return out

    def _fine_volume_unit(self) -> None:
        coarse = self._scale_impulse((self.offset & 0xFFFF) << self.fine_bits)
        fine = self._scale_impulse(self.offset & 0xFFFF)
        merged: list[int] = []
        for k in range(self.res // 2 * 2 * self.width):
            merged.extend(fine[2 * k:2 * k + 2])
            merged.extend(coarse[2 * k:2 * k + 2])
        self.impulses[:len(merged)] = merged

    def volume_unit(self, unit: float) -> None:
        """Scale the impulse tables so a unit step has amplitude ``unit``."""
        if unit == self._volume_unit:
            return
        if self.generate:
            self.treble_eq(EqualizerParams(-8.87, 8800, 44100))
        self._volume_unit = unit
        self.offset = (0x10001 * math.floor(unit * 0x10000 + 0.5)) & 0xFFFFFFFF
        if self.fine_bits:
            self._fine_volume_unit()
        else:
            scaled = self._scale_impulse(self.offset & 0xFFFF)
            self.impulses[:len(scaled)] = scaled

    def treble_eq(self, eq: EqualizerParams) -> None:
        """Generate the base impulse shape for the given equalization."""
        if not self.generate and eq == self.eq:
            return
        self.generate = False
        self.eq = eq

        treble = max(10.0 ** (eq.treble / 20.0), 0.000005)
        treble_freq = 22050.0
        sample_rate = float(eq.sample_rate)
        pt = treble_freq * 2 / sample_rate
        cutoff = eq.cutoff * 2 / sample_rate
        if cutoff >= pt * 0.95 or cutoff >= 0.95:
            cutoff = 0.5
            treble = 1.0

        n_harm = 4096.0
        rolloff = treble ** (1.0 / (n_harm * pt - n_harm * cutoff))
        rescale = 1.0 / rolloff ** (n_harm * cutoff)
        pow_a_n = rescale * rolloff ** n_harm
        pow_a_nc = rescale * rolloff ** (n_harm * cutoff)

        total = 0.0
        to_angle = _PI / 2 / n_harm / MAX_RES
        size = MAX_RES * (self.width - 2) // 2
        shape = [0.0] * size
        for i in reversed(range(size)):
            angle = (i * 2 + 1) * to_angle
            cos_angle = math.cos(angle)
            cos_nc_angle = math.cos(n_harm * cutoff * angle)
            cos_nc1_angle = math.cos((n_harm * cutoff - 1.0) * angle)

            b = 2.0 - 2.0 * cos_angle
            a = 1.0 - cos_angle - cos_nc_angle + cos_nc1_angle
            d = 1.0 + rolloff * (rolloff - 2.0 * cos_angle)
            c = (
                pow_a_n * rolloff * math.cos((n_harm - 1.0) * angle)
                - pow_a_n * math.cos(n_harm * angle)
                - pow_a_nc * rolloff * cos_nc1_angle
                + pow_a_nc * cos_nc_angle
            )
            y = (a * d + c * b) / (b * d)

            # fixed window which affects wider impulses more
            if self.width > 12:
                window = math.cos(n_harm / 1.25 / WIDEST_IMPULSE * angle)
                y *= window * window

            y = _to_float32(y)
            total += y
            shape[i] = y

        # integrate runs of length MAX_RES; 0.5 accounts for the mirrored half
        factor = _IMPULSE_AMP * 0.5 / total
        step = MAX_RES // self.res
        offset = MAX_RES if self.res > 1 else MAX_RES // 2
        half = self.width // 2
        base: list[int] = []
        for _ in range(self.res // 2 + 1):
            for w in range(-half, half):
                total_run = 0.0
                for i in range(MAX_RES):
                    index = w * MAX_RES + offset + i
                    if index < 0:
                        index = -index - 1
                    if index < size:
                        total_run += shape[index]
                base.append(math.floor(total_run * factor + (_IMPULSE_OFFSET + 0.5)) & 0xFFFF)
            offset -= step
        self.impulses[self._base:self._base + len(base)] = base

        unit = self._volume_unit
        if unit >= 0:
            self._volume_unit = -1.0
            self.volume_unit(unit)