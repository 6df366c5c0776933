from gbtools.cartridge import ROM_BANK_SIZE, Cartridge
from gbtools.mbc1 import MBC1


def make_rom(banks):
    return bytes(b for b in range(banks) for _ in range(ROM_BANK_SIZE))


def make_mbc(banks=8, extram=0):
    cart = Cartridge(make_rom(banks), extram=bytearray(extram))
    return cart, MBC1(cart)


def test_initial_bank_n_is_bank_one():
    cart, mbc = make_mbc()
    assert mbc.read(0x4000) == cart.rom[ROM_BANK_SIZE]
    assert mbc.bank_low == 1


def test_rom_bank_select():
    _, mbc = make_mbc()
    mbc.write(0x2000, 3)
    assert mbc.read(0x4000) == 3
    mbc.write(0x3FFF, 6)
    assert mbc.read(0x7FFF) == 6


def test_bank_zero_selects_bank_one():
    _, mbc = make_mbc()
    mbc.write(0x2000, 1)
    one = mbc.read(0x4000)
    mbc.write(0x2000, 0)
    assert mbc.read(0x4000) == one


def test_bank_zero_window_is_fixed():
    _, mbc = make_mbc()
    mbc.write(0x2000, 5)
    assert mbc.read(0x0000) == 0
    assert mbc.read(0x3FFF) == 0


def test_rom_bank_wraps_modulo_rom_size():
    _, mbc = make_mbc(banks=4)
    mbc.write(0x2000, 6)
    wrapped = mbc.read(0x4000)
    mbc.write(0x2000, 2)
    assert mbc.read(0x4000) == wrapped


def test_high_bits_in_rom_mode():
    _, mbc = make_mbc(banks=64)
    mbc.write(0x4000, 1)
    mbc.write(0x2000, 2)
    assert mbc.read(0x4000) == 34
    assert mbc.ram_bank == 0


def test_ram_mode_switches_extram_bank():
    cart, mbc = make_mbc(extram=32768)
    mbc.write(0x0000, 0x0A)
    mbc.write(0x6000, 1)
    mbc.write(0x4000, 2)
    mbc.write(0xA010, 0x77)
    assert cart.extram[2 * 0x2000 + 0x10] == 0x77
    mbc.write(0x4000, 0)
    assert mbc.read(0xA010) == cart.extram[0x10]
    mbc.write(0x4000, 2)
    assert mbc.read(0xA010) == 0x77


def test_ram_mode_does_not_add_high_bits_to_rom_bank():
    _, mbc = make_mbc(banks=64, extram=32768)
    mbc.write(0x6000, 1)
    mbc.write(0x4000, 1)
    mbc.write(0x2000, 2)
    assert mbc.read(0x4000) == 2


def test_ram_disable_and_enable():
    cart, mbc = make_mbc(extram=8192)
    mbc.write(0xA000, 0x12)
    assert mbc.read(0xA000) == 0x12
    mbc.write(0x0000, 0x00)
    assert mbc.read(0xA000) == 0xFF
    mbc.write(0xA000, 0x34)
    assert cart.extram[0] == 0x12
    mbc.write(0x1FFF, 0x0A)
    assert mbc.read(0xA000) == 0x12