"""Sound channel oscillators: two squares, a wave channel and noise."""

from __future__ import annotations

from typing import Optional

from gbtools.blip_buffer import BlipBuffer
from gbtools.blip_synth import BlipSynth

TRIGGER = 0x80
MAX_VOLUME = 7
SYNTH_RANGE = 15 * MAX_VOLUME * 2
WAVE_SIZE = 32
SWEEP_STOP = 2048

_DUTY_TABLE = (1, 2, 4, 6)
_MASK32 = 0xFFFFFFFF


class Oscillator:
    """State shared by every channel: length counter, volume and outputs.

    ``outputs`` holds the buffers for the four output selections:
    none, right, left and center.  The base :meth:`run` keeps the channel
    silent.
    """

    def __init__(self, synth: Optional[BlipSynth] = None) -> None:
        self.synth = synth
        self.outputs: list[Optional[BlipBuffer]] = [None, None, None, None]
        self.output: Optional[BlipBuffer] = None
        self.new_length = 0
        self.reset()

    def reset(self) -> None:
        self.delay = 0
        self.last_amp = 0
        self.period = 2048
        self.volume = 0
        self.global_volume = MAX_VOLUME
        self.frequency = 0
        self.length = 0
        self.enabled = False
        self.length_enabled = False
        self.output_select = 3
        self.output = self.outputs[self.output_select]

    def clock_length(self) -> None:
        """Count the length timer down by one step if it is enabled."""
        if self.length_enabled and self.length:
            self.length -= 1

    def write_register(self, reg: int, value: int) -> None:
        if reg == 4:
            self.length_enabled = bool(value & 0x40)

    def run(self, begin: int, end: int) -> None:
        """Produce output from clock ``begin`` to ``end``."""
        self._silence(begin)

    def _silence(self, time: int) -> None:
        if self.last_amp:
            self.synth.offset(time, -self.last_amp, self.output)
            self.last_amp = 0
        self.delay = 0

    def _length_expired(self) -> bool:
        return not self.length and self.length_enabled


class Envelope(Oscillator):
    """An oscillator whose volume follows a stepped envelope."""

    def reset(self) -> None:
        self.env_period = 0
        self.env_dir = 0
        self.env_delay = 0
        self.new_volume = 0
        super().reset()

    def clock_envelope(self) -> None:
        """Advance the envelope one step, moving volume within 0-15."""
        if not self.env_delay:
            return
        self.env_delay -= 1
        if self.env_delay:
            return
        self.env_delay = self.env_period
        if self.env_dir:
            if self.volume < 15:
                self.volume += 1
        elif self.volume > 0:
            self.volume -= 1

    def write_register(self, reg: int, value: int) -> None:
        if reg == 2:
            self.env_period = value & 7
            self.env_dir = value & 8
            self.volume = self.new_volume = value >> 4
        elif reg == 4 and value & TRIGGER:
            self.env_delay = self.env_period
            self.volume = self.new_volume
            self.enabled = True
        super().write_register(reg, value)


class Square(Envelope):
    """Square wave channel with duty cycle and an optional frequency sweep."""

    def __init__(self, synth: Optional[BlipSynth] = None, has_sweep: bool = False) -> None:
        self.has_sweep = has_sweep
        super().__init__(synth)

    def reset(self) -> None:
        self.phase = 1
        self.duty = 1
        self.sweep_period = 0
        self.sweep_delay = 0
        self.sweep_shift = 0
        self.sweep_dir = 0
        self.sweep_freq = 0
        self.new_length = 0
        super().reset()

    def clock_sweep(self) -> None:
        """Advance the frequency sweep one step."""
        if not (self.sweep_period and self.sweep_delay):
            return
        self.sweep_delay -= 1
        if self.sweep_delay:
            return
        self.sweep_delay = self.sweep_period
        self.frequency = self.sweep_freq
        self.period = (2048 - self.frequency) * 4

        offset = self.sweep_freq >> self.sweep_shift
        if self.sweep_dir:
            offset = -offset
        self.sweep_freq += offset

        if self.sweep_freq < 0:
            self.sweep_freq = 0
        elif self.sweep_freq >= SWEEP_STOP:
            self.sweep_delay = 0
            self.sweep_freq = SWEEP_STOP

    def write_register(self, reg: int, value: int) -> None:
        if reg == 0:
            self.sweep_period = (value >> 4) & 7
            self.sweep_shift = value & 7
            self.sweep_dir = value & 0x08
        elif reg == 1:
            self.new_length = self.length = 64 - (value & 0x3F)
            self.duty = _DUTY_TABLE[(value >> 6) & 3]
        elif reg == 3:
            self.frequency = (self.frequency & ~0xFF) + value
            self.length = self.new_length
        elif reg == 4:
            self.frequency = (value & 7) * 0x100 + (self.frequency & 0xFF)
            self.length = self.new_length
            if value & TRIGGER:
                self.sweep_freq = self.frequency
                if self.has_sweep and self.sweep_period and self.sweep_shift:
                    self.sweep_delay = 1
                    self.clock_sweep()
        self.period = (2048 - self.frequency) * 4
        super().write_register(reg, value)

    def run(self, begin: int, end: int) -> None:
        if (
            not self.enabled
            or self._length_expired()
            or not self.volume
            or self.sweep_freq == SWEEP_STOP
            or not self.frequency
            or self.period < 27
        ):
            self._silence(begin)
            return

        amp = (self.volume if self.phase < self.duty else -self.volume) * self.global_volume
        if amp != self.last_amp:
            self.synth.offset(begin, amp - self.last_amp, self.output)
            self.last_amp = amp

        time = begin + self.delay
        if time < end:
            output = self.output
            phase = self.phase
            amp *= 2
            while time < end:
                phase = (phase + 1) & 7
                if phase == 0 or phase == self.duty:
                    amp = -amp
                    self.synth.offset_inline(time, amp, output)
                time += self.period
            self.phase = phase
            self.last_amp = amp >> 1
        self.delay = time - end


class Wave(Oscillator):
    """Channel playing 32 four-bit samples from wave RAM."""

    def __init__(self, synth: Optional[BlipSynth] = None) -> None:
        self.new_enabled = False
        self.wave = [0] * WAVE_SIZE
        super().__init__(synth)

    def reset(self) -> None:
        self.volume_shift = 0
        self.wave_pos = 0
        self.new_length = 0
        self.wave = [0] * WAVE_SIZE
        super().reset()

    def write_register(self, reg: int, value: int) -> None:
        if reg == 0:
            self.new_enabled = bool(value & 0x80)
            self.enabled = self.enabled and self.new_enabled
        elif reg == 1:
            self.new_length = self.length = 256 - value
        elif reg == 2:
            self.volume = (value >> 5) & 3
            self.volume_shift = (self.volume - 1) & 7  # 7 means silence
        elif reg == 3:
            self.frequency = (self.frequency & ~0xFF) + value
        elif reg == 4:
            self.frequency = (value & 7) * 0x100 + (self.frequency & 0xFF)
            if self.new_enabled and value & TRIGGER:
                self.wave_pos = 0
                self.length = self.new_length
                self.enabled = True
        self.period = (2048 - self.frequency) * 2
        super().write_register(reg, value)

    def run(self, begin: int, end: int) -> None:
        if (
            not self.enabled
            or self._length_expired()
            or not self.volume
            or not self.frequency
            or self.period < 7
        ):
            self._silence(begin)
            return

        vol_factor = self.global_volume * 2
        shift = self.volume_shift

        # wave data or shift may have changed
        diff = (self.wave[self.wave_pos] >> shift) * vol_factor - self.last_amp
        if diff:
            self.last_amp += diff
            self.synth.offset(begin, diff, self.output)

        time = begin + self.delay
        if time < end:
            output = self.output
            pos = self.wave_pos
            while time < end:
                pos = (pos + 1) % WAVE_SIZE
                amp = (self.wave[pos] >> shift) * vol_factor
                delta = amp - self.last_amp
                if delta:
                    self.last_amp = amp
                    self.synth.offset_inline(time, delta, output)
                time += self.period
            self.wave_pos = pos
        self.delay = time - end


class Noise(Envelope):
    """Noise channel driven by a linear-feedback shift register."""

    def reset(self) -> None:
        self.bits = 1
        self.tap = 14
        super().reset()

    def write_register(self, reg: int, value: int) -> None:
        if reg == 1:
            self.new_length = self.length = 64 - (value & 0x3F)
        elif reg == 2:
            # Current volume only follows this write when the upper bits are clear.
            previous = self.volume
            super().write_register(reg, value)
            if value & 0xF8:
                self.volume = previous
            return
        elif reg == 3:
            self.tap = 14 - (value & 8)
            divisor = (value & 7) * 16 or 8
            self.period = divisor << (value >> 4)
        elif reg == 4 and value & TRIGGER:
            self.bits = _MASK32
            self.length = self.new_length
        super().write_register(reg, value)

    def run(self, begin: int, end: int) -> None:
        if not self.enabled or self._length_expired() or not self.volume:
            self._silence(begin)
            return

        amp = (-self.volume if self.bits & 1 else self.volume) * self.global_volume
        if amp != self.last_amp:
            self.synth.offset(begin, amp - self.last_amp, self.output)
            self.last_amp = amp

        time = begin + self.delay
        if time < end:
            output = self.output
            resampled_period = output.resampled_duration(self.period)
            resampled_time = output.resampled_time(time)
            mask = ~(1 << self.tap) & _MASK32
            bits = self.bits
            amp *= 2
            while time < end:
                feedback = bits
                bits >>= 1
                feedback = 1 & (feedback ^ bits)
                time += self.period
                bits = (feedback << self.tap) | (bits & mask)
                # feedback is set exactly when the output level flips
                if feedback:
                    amp = -amp
                    self.synth.offset_resampled(resampled_time, amp, output)
                resampled_time += resampled_period
            self.bits = bits
            self.last_amp = amp >> 1
        self.delay = time - end