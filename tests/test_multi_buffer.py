import pytest

from gbtools.blip_synth import BlipSynth
from gbtools.multi_buffer import MonoBuffer, SilentBuffer, StereoBuffer


def setup(buffer):
    buffer.set_sample_rate(44100, 100)
    buffer.set_clock_rate(44100)
    return buffer


def test_samples_per_frame():
    assert MonoBuffer().samples_per_frame == 1
    assert StereoBuffer().samples_per_frame == 2
    assert SilentBuffer().samples_per_frame == 1


def test_channels_changed_count_starts_at_one_and_increments():
    mono = MonoBuffer()
    assert mono.channels_changed_count == 1
    mono.channels_changed()
    assert mono.channels_changed_count == 2


def test_mono_records_rate_and_length():
    mono = setup(MonoBuffer())
    assert mono.sample_rate == 44100
    assert mono.length == 100
    assert mono.center.clock_rate == 44100


def test_mono_channel_is_one_buffer():
    mono = MonoBuffer()
    chan = mono.channel(0)
    assert chan.center is mono.center
    assert chan.left is mono.center
    assert chan.right is mono.center


def test_stereo_channel_buffers():
    stereo = setup(StereoBuffer())
    chan = stereo.channel(3)
    assert (chan.center, chan.left, chan.right) == (stereo.center, stereo.left, stereo.right)
    assert stereo.left.clock_rate == 44100


def test_silent_buffer_is_empty():
    silent = SilentBuffer()
    silent.set_sample_rate(22050, 50)
    assert (silent.sample_rate, silent.length) == (22050, 50)
    silent.end_frame(100)
    assert silent.samples_avail() == 0
    assert silent.read_samples(10) == []
    chan = silent.channel(0)
    assert (chan.center, chan.left, chan.right) == (None, None, None)


def test_stereo_odd_count_raises():
    stereo = setup(StereoBuffer())
    with pytest.raises(ValueError):
        stereo.read_samples(3)


def test_stereo_avail_is_twice_mono():
    mono, stereo = setup(MonoBuffer()), setup(StereoBuffer())
    mono.end_frame(100)
    stereo.end_frame(100)
    assert mono.samples_avail() == 100
    assert stereo.samples_avail() == 2 * mono.samples_avail()


def test_clear_drops_samples():
    stereo = setup(StereoBuffer())
    stereo.end_frame(50)
    stereo.clear()
    assert stereo.samples_avail() == 0
    assert stereo.read_samples(10) == []


def test_mono_mix_matches_mono_buffer():
    mono, stereo = setup(MonoBuffer()), setup(StereoBuffer())
    synth = BlipSynth(3, 30, 0.3)
    synth.offset(10, 30, mono.center)
    synth.offset(10, 30, stereo.center)
    mono.end_frame(120)
    stereo.end_frame(120, False)
    expected = mono.read_samples(120)
    out = stereo.read_samples(240)
    assert len(out) == 240
    assert out[0::2] == expected
    assert out[1::2] == expected
    assert max(expected) > 0


def test_stereo_mix_keeps_sides_apart():
    stereo = setup(StereoBuffer())
    synth = BlipSynth(3, 30, 0.3)
    synth.offset(10, 30, stereo.left)
    stereo.end_frame(120, True)
    out = stereo.read_samples(240)
    assert all(s == 0 for s in out[1::2])
    assert max(out[0::2]) > 0


def test_partial_read_reduces_available():
    stereo = setup(StereoBuffer())
    stereo.end_frame(100)
    out = stereo.read_samples(40)
    assert len(out) == 40
    assert stereo.samples_avail() == 200 - 40