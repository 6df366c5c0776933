"""Cartridge contents and the base memory bank controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

ROM_BANK_SIZE = 0x4000
EXTRAM_BANK_SIZE = 0x2000
PAGE_COUNT = 0x100

ReadHandler = Callable[[int], int]
WriteHandler = Callable[[int, int], None]

_ROM_BANKS = {
    0x00: 2,
    0x01: 4,
    0x02: 8,
    0x03: 16,
    0x04: 32,
    0x05: 64,
    0x06: 128,
    0x07: 256,
    0x52: 72,
    0x53: 80,
    0x54: 96,
}

_RAM_BYTES = {
    0x00: 0,
    0x01: 2048,
    0x02: 8192,
    0x03: 32768,
    0x04: 131072,
    0x05: 65536,
}


def rom_size_to_banks(code: int) -> int:
    """Number of 16 KiB ROM banks for a header ROM-size byte (2 if unknown)."""
    return _ROM_BANKS.get(code, 2)


def ram_size_to_bytes(code: int) -> int:
    """Number of external RAM bytes for a header RAM-size byte (0 if unknown)."""
    return _RAM_BYTES.get(code, 0)


@dataclass
class Cartridge:
    """The ROM image, external RAM and boot ROM of an inserted cartridge."""

    rom: bytes
    extram: bytearray = field(default_factory=bytearray)
    bootrom: bytes = b""
    mbc_type: int = 0
    rom_banks: int = 0

    def __post_init__(self) -> None:
        self.rom = bytes(self.rom)
        self.extram = bytearray(self.extram)
        self.bootrom = bytes(self.bootrom)
        if self.rom_banks <= 0:
            self.rom_banks = max(1, len(self.rom) // ROM_BANK_SIZE)

    @property
    def rom_size(self) -> int:
        return len(self.rom)

    @property
    def extram_size(self) -> int:
        return len(self.extram)


class MemoryBankController:
    """Maps cartridge address pages to read and write handlers.

    The 64 KiB address space is split into 256 pages of 256 bytes; each page
    gets one read handler and one write handler.  Pages the cartridge does
    not claim are left unmapped.
    """

    def __init__(self, cart: Cartridge) -> None:
        self.cart = cart
        self._readers: list[Optional[ReadHandler]] = [None] * PAGE_COUNT
        self._writers: list[Optional[WriteHandler]] = [None] * PAGE_COUNT
        self.rom_bank_offset = ROM_BANK_SIZE
        self.extram_bank_offset = 0
        self.install()

    def install(self) -> None:
        """Reset bank pointers and map both ROM windows for reading."""
        self.rom_bank_offset = ROM_BANK_SIZE
        self.extram_bank_offset = 0
        self.map_read(0x0000, 0x3FFF, self._read_bank_0)
        self.map_read(0x4000, 0x7FFF, self._read_bank_n)

    def read(self, address: int) -> int:
        _check_address(address)
        handler = self._readers[address >> 8]
        if handler is None:
            raise ValueError(f"address {address:#06x} is not mapped by the cartridge")
        return handler(address)

    def write(self, address: int, data: int) -> None:
        _check_address(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"data {data!r} is not a byte")
        handler = self._writers[address >> 8]
        if handler is None:
            raise ValueError(f"address {address:#06x} is not mapped by the cartridge")
        handler(address, data)

    def map_read(self, start: int, end: int, handler: ReadHandler) -> None:
        """Route reads of every page from ``start`` to ``end`` to ``handler``."""
        first, last = _page_range(start, end)
        self._readers[first:last + 1] = [handler] * (last - first + 1)

    def map_write(self, start: int, end: int, handler: WriteHandler) -> None:
        """Route writes to every page from ``start`` to ``end`` to ``handler``."""
        first, last = _page_range(start, end)
        self._writers[first:last + 1] = [handler] * (last - first + 1)

    # Shared handlers and helpers for the concrete controllers.

    def _extram_end_page(self) -> int:
        return 0xA0 + min(self.cart.extram_size, EXTRAM_BANK_SIZE) // 256

    def _map_extram_window(self, reader: ReadHandler, writer: WriteHandler) -> None:
        """Map A000-BFFF: RAM where it is installed, open bus after it."""
        end = self._extram_end_page() << 8
        if end > 0xA000:
            self.map_read(0xA000, end - 1, reader)
            self.map_write(0xA000, end - 1, writer)
        if end <= 0xBFFF:
            self.map_read(end, 0xBFFF, self._read_ff)
            self.map_write(end, 0xBFFF, self._ignore_write)

    def _read_bank_0(self, address: int) -> int:
        return self.cart.rom[address]

    def _read_bank_n(self, address: int) -> int:
        return self.cart.rom[self.rom_bank_offset + (address & 0x3FFF)]

    def _read_extram(self, address: int) -> int:
        return self.cart.extram[self.extram_bank_offset + (address & 0x1FFF)]

    def _write_extram(self, address: int, data: int) -> None:
        self.cart.extram[self.extram_bank_offset + (address & 0x1FFF)] = data

    @staticmethod
    def _read_ff(address: int) -> int:
        return 0xFF

    @staticmethod
    def _ignore_write(address: int, data: int) -> None:
        return None


class NoMBC(MemoryBankController):
    """A plain 32 KiB cartridge with optional unbanked RAM."""

    def install(self) -> None:
        super().install()
        self.map_write(0x0000, 0x7FFF, self._ignore_write)
        self._map_extram_window(self._read_extram, self._write_extram)


def _check_address(address: int) -> None:
    if not 0 <= address <= 0xFFFF:
        raise ValueError(f"address {address!r} is outside the 16-bit space")


def _page_range(start: int, end: int) -> tuple[int, int]:
    _check_address(start)
    _check_address(end)
    if start > end:
        raise ValueError("start address lies after end address")
    return start >> 8, end >> 8