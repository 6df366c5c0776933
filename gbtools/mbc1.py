"""MBC1 memory bank controller."""

from __future__ import annotations

from gbtools.cartridge import EXTRAM_BANK_SIZE, ROM_BANK_SIZE, MemoryBankController


class MBC1(MemoryBankController):
    """MBC1: low/high bank registers, ROM/RAM mode and RAM enable."""

    def install(self) -> None:
        super().install()
        self.bank_low = 0x01
        self.bank_high = 0x00
        self.ram_bank = 0x00
        self.mode_select = 0x00
        self.map_write(0x0000, 0x1FFF, self._write_ram_enable)
        self.map_write(0x2000, 0x3FFF, self._write_rom_bank_select)
        self.map_write(0x4000, 0x5FFF, self._write_ram_bank_select)
        self.map_write(0x6000, 0x7FFF, self._write_mode_select)
        self._map_extram_window(self._read_extram, self._write_extram)

    def _regs_changed(self) -> None:
        rombank = self.bank_low or 1
        if self.mode_select == 0:
            rombank += (self.bank_high & 0x03) << 5
            rambank = 0
        else:
            rambank = self.bank_high & 0x03
        self.ram_bank = rambank
        self.rom_bank_offset = (rombank * ROM_BANK_SIZE) % self.cart.rom_size
        self.extram_bank_offset = rambank * EXTRAM_BANK_SIZE

    def _write_ram_enable(self, address: int, data: int) -> None:
        if data == 0x0A:
            self.map_read(0xA000, 0xBFFF, self._read_extram)
            self.map_write(0xA000, 0xBFFF, self._write_extram)
        else:
            self.map_read(0xA000, 0xBFFF, self._read_ff)
            self.map_write(0xA000, 0xBFFF, self._ignore_write)

    def _write_rom_bank_select(self, address: int, data: int) -> None:
        self.bank_low = data
        self._regs_changed()

    def _write_ram_bank_select(self, address: int, data: int) -> None:
        self.bank_high = data
        self._regs_changed()

    def _write_mode_select(self, address: int, data: int) -> None:
        self.mode_select = data
        self._regs_changed()