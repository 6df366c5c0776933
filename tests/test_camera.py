import pytest

from gbtools.camera import CameraMBC
from gbtools.cartridge import Cartridge

PHOTO_START = 0x100
PHOTO_END = 0x100 + 14 * 16 * 16


@pytest.fixture
def mbc():
    rom = b"".join(bytes([bank]) * 0x4000 for bank in range(4))
    cart = Cartridge(rom=rom, extram=bytearray(0x20000))
    return CameraMBC(cart)


def test_initial_banks(mbc):
    assert mbc.read(0x0000) == 0
    assert mbc.read(0x4000) == 1
    assert mbc.cam_mode is False


def test_rom_bank_select(mbc):
    mbc.write(0x2000, 2)
    assert mbc.read(0x4000) == 2
    assert mbc.read(0x7FFF) == 2
    mbc.write(0x2000, 3)
    assert mbc.read(0x5000) == 3


def test_rom_bank_zero_selects_one(mbc):
    mbc.write(0x2000, 2)
    mbc.write(0x2000, 0)
    assert mbc.read(0x4000) == 1


def test_rom_bank_wraps_around(mbc):
    mbc.write(0x2000, 6)
    assert mbc.read(0x4000) == 2


def test_ram_read_write_round_trip(mbc):
    mbc.write(0xA010, 0x42)
    assert mbc.read(0xA010) == 0x42
    assert mbc.cart.extram[0x10] == 0x42


def test_ram_bank_select(mbc):
    mbc.write(0x4000, 1)
    mbc.write(0xA000, 0x77)
    assert mbc.cart.extram[0x2000] == 0x77
    mbc.write(0x4000, 0)
    assert mbc.read(0xA000) == 0
    mbc.write(0x4000, 1)
    assert mbc.read(0xA000) == 0x77


def test_cam_mode_reads_zero_and_ignores_ram_writes(mbc):
    mbc.write(0xA005, 0x99)
    mbc.write(0x4000, 0x10)
    assert mbc.cam_mode is True
    assert mbc.read(0xA005) == 0
    mbc.write(0xA123, 0x55)
    assert mbc.cart.extram[0x123] == 0
    mbc.write(0x4000, 0x00)
    assert mbc.read(0xA005) == 0x99


def test_boot_captures_do_not_touch_ram(mbc):
    mbc.write(0x4000, 0x10)
    for _ in range(140):
        mbc.write(0xA000, 0x03)
    assert mbc.pics_taken == 140
    assert not any(mbc.cart.extram)


def test_other_register_writes_do_not_capture(mbc):
    mbc.write(0x4000, 0x10)
    mbc.write(0xA000, 0x01)
    mbc.write(0xA001, 0x03)
    assert mbc.pics_taken == 0


def test_capture_writes_pattern_into_photo_ram(mbc):
    mbc.write(0x4000, 0x10)
    for _ in range(141):
        mbc.write(0xA000, 0x03)
    extram = mbc.cart.extram
    assert mbc.pics_taken == 141
    assert not any(extram[:PHOTO_START])
    assert not any(extram[PHOTO_END:])
    photo = extram[PHOTO_START:PHOTO_END]
    assert any(photo)
    for tile_start in range(0, len(photo), 16):
        tile = photo[tile_start:tile_start + 16]
        assert tile == tile[:2] * 8
        assert set(tile) <= {0x00, 0xFF}


def test_consecutive_captures_shift_pattern(mbc):
    mbc.write(0x4000, 0x10)
    for _ in range(141):
        mbc.write(0xA000, 0x03)
    first = bytes(mbc.cart.extram[PHOTO_START:PHOTO_END])
    mbc.write(0xA000, 0x03)
    second = bytes(mbc.cart.extram[PHOTO_START:PHOTO_END])
    # The pattern moves by one tile per capture.
    assert second[:-16] == first[16:] or second[16:32] == first[32:48]
    assert second != first