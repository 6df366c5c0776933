"""HuC3 memory bank controller."""

from __future__ import annotations

import logging

from gbtools.cartridge import EXTRAM_BANK_SIZE, ROM_BANK_SIZE, MemoryBankController

logger = logging.getLogger(__name__)


class HuC3(MemoryBankController):
    """HuC3: ROM bank select at 2000-20FF and a RAM mode register.

    Reads of external RAM depend on the mode written to 0000-1FFF:
    0x0A gives RAM, 0x0C and 0x0D give 0x01, anything else gives 0xFF.
    """

    def install(self) -> None:
        super().install()
        self.ram_mode = 0
        self.reg_rom_bank_low = 1
        self.reg_rom_bank_high = 0
        self.extram_bank_num = 0
        self.map_write(0x0000, 0x7FFF, self._write_dummy)
        self.map_write(0x0000, 0x1FFF, self._write_ram_enable)
        self.map_write(0x2000, 0x20FF, self._write_rom_bank_select_low)
        self.map_write(0x4000, 0x40FF, self._write_ram_bank_select)
        self._map_extram_window(self._read_huc3_extram, self._write_huc3_extram)
        end = self._extram_end_page() << 8
        if end <= 0xBFFF:
            self.map_write(end, 0xBFFF, self._write_dummy)

    @staticmethod
    def _write_dummy(address: int, data: int) -> None:
        logger.debug("write: %04X:%02X", address, data)

    def _write_ram_enable(self, address: int, data: int) -> None:
        logger.debug("write: %04X:%02X", address, data)
        self.ram_mode = data

    def _write_rom_bank_select_low(self, address: int, data: int) -> None:
        logger.debug("write: %04X:%02X", address, data)
        self.reg_rom_bank_low = data
        bank = (self.reg_rom_bank_low + self.reg_rom_bank_high * 256) % self.cart.rom_banks
        if bank == 0:
            bank = 1
        self.rom_bank_offset = bank * ROM_BANK_SIZE

    def _write_ram_bank_select(self, address: int, data: int) -> None:
        logger.debug("write: %04X:%02X", address, data)
        if self.cart.extram_size == 32768:
            self.extram_bank_num = data & 0x03
            self.extram_bank_offset = self.extram_bank_num * EXTRAM_BANK_SIZE

    def _read_huc3_extram(self, address: int) -> int:
        if self.ram_mode == 0x0A:
            data = self._read_extram(address)
        elif self.ram_mode in (0x0C, 0x0D):
            data = 0x01
        else:
            data = 0xFF
        logger.debug("read: %04X:%02X", address, data)
        return data

    def _write_huc3_extram(self, address: int, data: int) -> None:
        logger.debug("write: %04X:%02X", address, data)
        self._write_extram(address, data)