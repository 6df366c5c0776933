"""MBC5 memory bank controller."""

from __future__ import annotations

import logging

from gbtools.cartridge import EXTRAM_BANK_SIZE, ROM_BANK_SIZE, MemoryBankController

logger = logging.getLogger(__name__)

RUMBLE_CART_TYPES = frozenset({0x1C, 0x1D, 0x1E})


class MBC5(MemoryBankController):
    """MBC5: 9-bit ROM bank select, up to 8 RAM banks and optional rumble."""

    def install(self) -> None:
        super().install()
        self.reg_rom_bank_low = 1
        self.reg_rom_bank_high = 0
        self.extram_bank_num = 0
        self.map_write(0x0000, 0x1FFF, self._ignore_write)
        self.map_write(0x2000, 0x2FFF, self._write_rom_bank_select_low)
        self.map_write(0x3000, 0x3FFF, self._write_rom_bank_select_high)
        self.map_write(0x4000, 0x5FFF, self._write_ram_bank_select)
        self.map_write(0x6000, 0x7FFF, self._ignore_write)
        self._map_extram_window(self._read_extram, self._write_extram)

    def _select_rom_bank(self) -> None:
        bank = (self.reg_rom_bank_low + self.reg_rom_bank_high * 256) % self.cart.rom_banks
        if bank == 0:
            bank = 1
        self.rom_bank_offset = bank * ROM_BANK_SIZE

    def _write_rom_bank_select_low(self, address: int, data: int) -> None:
        self.reg_rom_bank_low = data
        self._select_rom_bank()

    def _write_rom_bank_select_high(self, address: int, data: int) -> None:
        self.reg_rom_bank_high = data & 0x01
        self._select_rom_bank()

    def _write_ram_bank_select(self, address: int, data: int) -> None:
        if self.cart.extram_size > 0:
            self.extram_bank_num = data & 0x07
            self.extram_bank_offset = self.extram_bank_num * EXTRAM_BANK_SIZE
        if self.cart.mbc_type in RUMBLE_CART_TYPES and data & 0x08:
            logger.info("rumble ON, power: %d", data >> 4)