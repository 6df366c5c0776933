import pytest

from gbtools.cartridge import Cartridge
from gbtools.mbc7 import MBC7


def _rom(banks: int) -> bytes:
    rom = bytearray(banks * 0x4000)
    for bank in range(banks):
        rom[bank * 0x4000] = bank
    return bytes(rom)


def _mbc(banks: int = 8, extram: int = 0) -> MBC7:
    return MBC7(Cartridge(rom=_rom(banks), extram=bytearray(extram)))


def test_initial_bank_is_one():
    mbc = _mbc()
    assert mbc.read(0x4000) == 1


def test_bank_select_across_whole_range():
    mbc = _mbc()
    mbc.write(0x2000, 4)
    assert mbc.read(0x4000) == 4
    mbc.write(0x3FFF, 6)
    assert mbc.read(0x4000) == 6


def test_bank_zero_and_wrap():
    mbc = _mbc(banks=4)
    mbc.write(0x2000, 0)
    assert mbc.read(0x4000) == 1
    mbc.write(0x2000, 4)
    assert mbc.read(0x4000) == 1
    mbc.write(0x2000, 7)
    assert mbc.read(0x4000) == 7 % 4


def test_ram_banks_with_32k_extram():
    mbc = _mbc(extram=32768)
    mbc.write(0xA000, 0x33)
    mbc.write(0x4000, 0x07)
    assert mbc.extram_bank_num == 3
    assert mbc.read(0xA000) == 0
    mbc.write(0x4000, 0)
    assert mbc.read(0xA000) == 0x33


def test_ram_bank_select_ignored_without_32k_extram():
    mbc = _mbc(extram=8192)
    mbc.write(0xA123, 0x44)
    mbc.write(0x4000, 1)
    assert mbc.extram_bank_offset == 0
    assert mbc.read(0xA123) == 0x44


def test_no_extram_reads_ff():
    mbc = _mbc()
    assert mbc.read(0xBFFF) == 0xFF


def test_read_outside_space_raises():
    mbc = _mbc()
    with pytest.raises(ValueError):
        mbc.read(0x10000)