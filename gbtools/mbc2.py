"""MBC2 memory bank controller with its built-in 512 x 4-bit RAM."""

from __future__ import annotations

from gbtools.cartridge import ROM_BANK_SIZE, MemoryBankController


class MBC2(MemoryBankController):
    """MBC2: ROM bank select and nibble-wide internal RAM at A000-A1FF."""

    def install(self) -> None:
        super().install()
        self.rom_bank = 1
        self.map_write(0x0000, 0x1FFF, self._ignore_write)
        self.map_write(0x2000, 0x3FFF, self._write_rom_bank_select)
        self.map_write(0x4000, 0x7FFF, self._ignore_write)
        self.map_read(0xA000, 0xA1FF, self._read_nibble_ram)
        self.map_write(0xA000, 0xA1FF, self._write_nibble_ram)
        self.map_read(0xA200, 0xBFFF, self._read_ff)
        self.map_write(0xA200, 0xBFFF, self._ignore_write)

    def _write_rom_bank_select(self, address: int, data: int) -> None:
        if data == 0:
            self.rom_bank = 1
            self.rom_bank_offset = ROM_BANK_SIZE
        else:
            self.rom_bank = data
            self.rom_bank_offset = data * ROM_BANK_SIZE % self.cart.rom_size

    def _read_nibble_ram(self, address: int) -> int:
        return self.cart.extram[address & 0x01FF]

    def _write_nibble_ram(self, address: int, data: int) -> None:
        self.cart.extram[address & 0x01FF] = data & 0x0F