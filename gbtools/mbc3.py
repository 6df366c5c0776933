"""MBC3 memory bank controller."""

from __future__ import annotations

import logging

from gbtools.cartridge import EXTRAM_BANK_SIZE, ROM_BANK_SIZE, MemoryBankController

logger = logging.getLogger(__name__)


class MBC3(MemoryBankController):
    """MBC3: 7-bit ROM bank select, RAM banks 0-7 and RTC register banks."""

    def install(self) -> None:
        super().install()
        self.rom_bank = 1
        self.extram_bank_num = 0
        self.map_write(0x0000, 0x1FFF, self._ignore_write)
        self.map_write(0x2000, 0x3FFF, self._write_rom_bank_select)
        self.map_write(0x4000, 0x5FFF, self._write_ram_bank_select)
        self.map_write(0x6000, 0x7FFF, self._ignore_write)
        self._map_extram_window(self._read_extram, self._write_extram)

    def _write_rom_bank_select(self, address: int, data: int) -> None:
        data &= 0x7F
        self.rom_bank = data
        if data == 0:
            self.rom_bank_offset = ROM_BANK_SIZE
        else:
            self.rom_bank_offset = data * ROM_BANK_SIZE % self.cart.rom_size

    def _write_ram_bank_select(self, address: int, data: int) -> None:
        if 0 <= data <= 7:
            self.extram_bank_num = data
            self.extram_bank_offset = data * EXTRAM_BANK_SIZE
            self._map_extram_window(self._read_extram, self._write_extram)
        elif 0x08 <= data <= 0x0C:
            self.extram_bank_num = data
            self.map_read(0xA000, 0xBFFF, self._read_rtc)
            self.map_write(0xA000, 0xBFFF, self._ignore_write)
        else:
            logger.warning("Switching to invalid extram bank %02X", data)

    @staticmethod
    def _read_rtc(address: int) -> int:
        return 0x00