"""HuC1 memory bank controller."""

from __future__ import annotations

from gbtools.cartridge import EXTRAM_BANK_SIZE, ROM_BANK_SIZE, MemoryBankController


class HuC1(MemoryBankController):
    """HuC1: MBC1-like registers, always in RAM banking mode, RAM always enabled."""

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
        self.ram_bank = self.bank_high & 0x03
        self.rom_bank_offset = (rombank * ROM_BANK_SIZE) % self.cart.rom_size
        self.extram_bank_offset = self.ram_bank * EXTRAM_BANK_SIZE

    def _write_ram_enable(self, address: int, data: int) -> None:
        # Any value enables the whole external RAM window.
        self.map_read(0xA000, 0xBFFF, self._read_extram)
        self.map_write(0xA000, 0xBFFF, self._write_extram)

    def _write_rom_bank_select(self, address: int, data: int) -> None:
        self.bank_low = data
        self._regs_changed()

    def _write_ram_bank_select(self, address: int, data: int) -> None:
        self.bank_high = data
        self._regs_changed()

    def _write_mode_select(self, address: int, data: int) -> None:
        self.mode_select = data
        self._regs_changed()