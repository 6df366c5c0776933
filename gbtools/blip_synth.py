"""Band-limited transition synthesizers that add waveforms to a BlipBuffer."""

from __future__ import annotations

from typing import Optional

from gbtools.blip_buffer import (
    BUFFER_ACCURACY,
    MAX_RES,
    RES_BITS,
    WIDEST_IMPULSE,
    BlipBuffer,
    BlipImpulse,
    EqualizerParams,
)

LOW_QUALITY = 1
MED_QUALITY = 2
GOOD_QUALITY = 3
HIGH_QUALITY = 4

_MASK32 = 0xFFFFFFFF
_PHASE_SHIFT = BUFFER_ACCURACY - RES_BITS
_PHASE_MASK = MAX_RES * 2 - 1

_FINE_BIT_LIMITS = ((64, 2), (128, 3), (256, 4), (512, 5), (1024, 6), (2048, 7))


def _fine_bits_for(abs_range: int) -> int:
    return next((bits for limit, bits in _FINE_BIT_LIMITS if abs_range <= limit), 8)


class BlipSynth:
    """Adds band-limited amplitude transitions into a :class:`BlipBuffer`.

    ``amplitude_range`` is the largest expected transition.  Ranges above 512,
    or negative ranges, select the higher-accuracy fine mode.
    """

    def __init__(self, quality: int, amplitude_range: int, volume: Optional[float] = None) -> None:
        if not 1 <= quality <= 5:
            raise ValueError(f"quality {quality!r} is not between 1 and 5")
        if not -32768 <= amplitude_range <= 32767 or amplitude_range == 0:
            raise ValueError(f"range {amplitude_range!r} must be a non-zero 16-bit value")
        self.quality = quality
        self.amplitude_range = amplitude_range
        self.abs_range = abs(amplitude_range)
        fine_mode = amplitude_range > 512 or amplitude_range < 0
        self.width = quality * 4 if quality < 5 else WIDEST_IMPULSE
        self.fine_bits = _fine_bits_for(self.abs_range) if fine_mode else 0
        self.impulse_size = self.width // 2 * (2 if fine_mode else 1)
        self.impulse = BlipImpulse(self.width, MAX_RES, self.fine_bits)
        if volume is not None:
            self.volume(volume)

    @property
    def output(self) -> Optional[BlipBuffer]:
        """Buffer used when a call names none."""
        return self.impulse.buf

    @output.setter
    def output(self, buffer: Optional[BlipBuffer]) -> None:
        self.impulse.buf = buffer

    def treble_eq(self, eq: EqualizerParams) -> None:
        self.impulse.treble_eq(eq)

    def volume(self, v: float) -> None:
        """Set the volume of a transition of size ``amplitude_range``."""
        self.impulse.volume_unit(v * (1.0 / self.abs_range))

    def volume_unit(self, unit: float) -> None:
        self.impulse.volume_unit(unit)

    def _target(self, buffer: Optional[BlipBuffer]) -> BlipBuffer:
        target = buffer if buffer is not None else self.impulse.buf
        if target is None:
            raise ValueError("no output buffer")
        return target

    def offset(self, time: int, delta: int, buffer: Optional[BlipBuffer] = None) -> None:
        """Add a transition of ``delta`` at source clock ``time``."""
        target = self._target(buffer)
        self.offset_resampled(time * target.factor + target.offset, delta, target)

    def offset_inline(self, time: int, delta: int, buffer: Optional[BlipBuffer] = None) -> None:
        self.offset(time, delta, buffer)

    def offset_resampled(self, time: int, delta: int, buffer: Optional[BlipBuffer] = None) -> None:
        """Add a transition of ``delta`` at an already resampled time."""
        target = self._target(buffer)
        sample_index = (time >> BUFFER_ACCURACY) & ~1
        if sample_index >= target.buffer_size:
            raise ValueError("transition went past end of buffer")

        data = target.buffer
        pos = WIDEST_IMPULSE // 2 - self.width // 2 + sample_index
        impulses = self.impulse.impulses
        imp = ((time >> _PHASE_SHIFT) & _PHASE_MASK) * self.impulse_size * 2
        offset = self.impulse.offset * delta

        if self.fine_bits:
            sub_range = 1 << self.fine_bits
            shifted = delta + sub_range // 2
            factors: tuple[int, ...] = (
                (shifted & (sub_range - 1)) - sub_range // 2,
                shifted >> self.fine_bits,
            )
        else:
            factors = (delta,)

        for _ in range(self.width // 2):
            pair = (data[pos] | (data[pos + 1] << 16)) - offset
            for factor in factors:
                pair += (impulses[imp] | (impulses[imp + 1] << 16)) * factor
                imp += 2
            pair &= _MASK32
            data[pos] = pair & 0xFFFF
            data[pos + 1] = pair >> 16
            pos += 2


class BlipWave:
    """A single waveform built from delays and new amplitudes."""

    def __init__(self, quality: int, amplitude_range: int, volume: Optional[float] = None) -> None:
        self.synth = BlipSynth(quality, amplitude_range, volume)
        self.time = 0
        self.last_amp = 0

    def volume(self, v: float) -> None:
        self.synth.volume(v)

    def volume_unit(self, unit: float) -> None:
        self.synth.volume_unit(unit)

    def treble_eq(self, eq: EqualizerParams) -> None:
        self.synth.treble_eq(eq)

    @property
    def output(self) -> Optional[BlipBuffer]:
        return self.synth.output

    @output.setter
    def output(self, buffer: Optional[BlipBuffer]) -> None:
        self.synth.output = buffer
        if buffer is None:
            self.time = 0
            self.last_amp = 0

    def amplitude(self, amp: int) -> None:
        """Change the wave to ``amp`` at the current time."""
        delta = amp - self.last_amp
        self.last_amp = amp
        self.synth.offset_inline(self.time, delta)

    def delay(self, t: int) -> None:
        self.time += t

    def end_frame(self, duration: int) -> None:
        """Move time into the next frame, starting at 0 if the wave fell behind."""
        self.time = max(self.time - duration, 0)