"""MBC7 memory bank controller."""

from __future__ import annotations

from gbtools.cartridge import EXTRAM_BANK_SIZE, ROM_BANK_SIZE, MemoryBankController


class MBC7(MemoryBankController):
    """MBC7: ROM bank select and banked RAM; the accelerometer is not modelled."""

    def install(self) -> None:
        super().install()
        self.reg_rom_bank_low = 1
        self.reg_rom_bank_high = 0
        self.extram_bank_num = 0
        self.map_write(0x0000, 0x1FFF, self._ignore_write)
        self.map_write(0x2000, 0x3FFF, self._write_rom_bank_select)
        self.map_write(0x4000, 0x5FFF, self._write_ram_bank_select)
        self.map_write(0x6000, 0x7FFF, self._ignore_write)
        self._map_extram_window(self._read_extram, self._write_extram)

    def _write_rom_bank_select(self, address: int, data: int) -> None:
        self.reg_rom_bank_low = data
        bank = (self.reg_rom_bank_low + self.reg_rom_bank_high * 256) % self.cart.rom_banks
        if bank == 0:
            bank = 1
        self.rom_bank_offset = bank * ROM_BANK_SIZE

    def _write_ram_bank_select(self, address: int, data: int) -> None:
        if self.cart.extram_size == 32768:
            self.extram_bank_num = data & 0x03
            self.extram_bank_offset = self.extram_bank_num * EXTRAM_BANK_SIZE