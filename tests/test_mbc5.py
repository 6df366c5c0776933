import logging

import pytest

from gbtools.cartridge import Cartridge
from gbtools.mbc5 import MBC5


def _rom(banks: int) -> bytes:
    rom = bytearray(banks * 0x4000)
    for bank in range(banks):
        rom[bank * 0x4000] = bank & 0xFF
        rom[bank * 0x4000 + 1] = bank >> 8
    return bytes(rom)


def _mbc(banks: int = 8, extram: int = 0, mbc_type: int = 0x19) -> MBC5:
    return MBC5(Cartridge(rom=_rom(banks), extram=bytearray(extram), mbc_type=mbc_type))


def test_initial_bank_is_one():
    mbc = _mbc()
    assert mbc.read(0x4000) == 1
    assert mbc.read(0x0000) == 0


def test_low_bank_select():
    mbc = _mbc()
    mbc.write(0x2000, 5)
    assert mbc.read(0x4000) == 5
    mbc.write(0x2FFF, 3)
    assert mbc.read(0x4000) == 3


def test_bank_zero_maps_to_one():
    mbc = _mbc()
    mbc.write(0x2000, 0)
    assert mbc.read(0x4000) == 1


def test_bank_wraps_by_bank_count():
    mbc = _mbc(banks=4)
    mbc.write(0x2000, 6)
    assert mbc.read(0x4000) == 6 % 4


def test_high_bit_selects_upper_banks():
    mbc = _mbc(banks=512)
    mbc.write(0x2000, 2)
    mbc.write(0x3000, 1)
    assert mbc.read(0x4000) == 2
    assert mbc.read(0x4001) == 1
    mbc.write(0x3000, 0xFE)
    assert mbc.read(0x4001) == 0
    assert mbc.read(0x4000) == 2


def test_extram_banks_are_separate():
    mbc = _mbc(extram=32768)
    mbc.write(0xA000, 0x11)
    mbc.write(0x4000, 1)
    assert mbc.read(0xA000) == 0
    mbc.write(0xA000, 0x22)
    mbc.write(0x4000, 0)
    assert mbc.read(0xA000) == 0x11
    mbc.write(0x4000, 1)
    assert mbc.read(0xA000) == 0x22
    assert mbc.cart.extram[0x2000] == 0x22


def test_small_extram_window_open_bus_after_ram():
    mbc = _mbc(extram=2048)
    mbc.write(0xA7FF, 0x5A)
    assert mbc.read(0xA7FF) == 0x5A
    assert mbc.read(0xA800) == 0xFF
    mbc.write(0xA800, 0x12)
    assert mbc.read(0xA800) == 0xFF


def test_no_extram_reads_ff():
    mbc = _mbc(extram=0)
    mbc.write(0x4000, 3)
    assert mbc.read(0xA000) == 0xFF
    assert mbc.extram_bank_offset == 0


def test_rumble_is_logged_for_rumble_carts(caplog):
    mbc = _mbc(mbc_type=0x1C)
    with caplog.at_level(logging.INFO, logger="gbtools.mbc5"):
        mbc.write(0x4000, 0x38)
    assert "rumble ON, power: 3" in caplog.text


def test_rumble_not_logged_for_plain_carts(caplog):
    mbc = _mbc(mbc_type=0x19)
    with caplog.at_level(logging.INFO, logger="gbtools.mbc5"):
        mbc.write(0x4000, 0x38)
    assert "rumble" not in caplog.text


def test_write_rejects_non_byte():
    mbc = _mbc()
    with pytest.raises(ValueError):
        mbc.write(0x2000, 0x100)