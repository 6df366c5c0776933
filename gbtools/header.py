"""Cartridge header parsing, checksums and a readable report."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Union

from gbtools.cartridge import ram_size_to_bytes, rom_size_to_banks

MAX_ROM_SIZE = 8 * 1024 * 1024
HEADER_START = 0x100
HEADER_END = 0x150
NORMAL_ENTRY = 0x00C35001
SGB_SUPPORTED = 0x03

NINTENDO_LOGO = bytes((
    0xCE, 0xED, 0x66, 0x66, 0xCC, 0x0D, 0x00, 0x0B,
    0x03, 0x73, 0x00, 0x83, 0x00, 0x0C, 0x00, 0x0D,
    0x00, 0x08, 0x11, 0x1F, 0x88, 0x89, 0x00, 0x0E,
    0xDC, 0xCC, 0x6E, 0xE6, 0xDD, 0xDD, 0xD9, 0x99,
    0xBB, 0xBB, 0x67, 0x63, 0x6E, 0x0E, 0xEC, 0xCC,
    0xDD, 0xDC, 0x99, 0x9F, 0xBB, 0xB9, 0x33, 0x3E,
))


def _c_string(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


def _require_length(rom: bytes, length: int) -> None:
    if len(rom) < length:
        raise ValueError(f"ROM is {len(rom)} bytes, the header needs {length}")


@dataclass(frozen=True)
class RomHeader:
    """The fields stored at 0100-014F of a cartridge ROM."""

    entry: int
    logo: bytes
    title: bytes
    new_licensee_code: bytes
    sgb_flag: int
    cartridge_type: int
    rom_size: int
    ram_size: int
    destination: int
    old_licensee_code: int
    rom_version: int
    header_checksum: int
    rom_checksum: int

    @classmethod
    def from_rom(cls, rom: bytes) -> "RomHeader":
        _require_length(rom, HEADER_END)
        return cls(
            entry=int.from_bytes(rom[0x100:0x104], "big"),
            logo=bytes(rom[0x104:0x134]),
            title=bytes(rom[0x134:0x144]),
            new_licensee_code=bytes(rom[0x144:0x146]),
            sgb_flag=rom[0x146],
            cartridge_type=rom[0x147],
            rom_size=rom[0x148],
            ram_size=rom[0x149],
            destination=rom[0x14A],
            old_licensee_code=rom[0x14B],
            rom_version=rom[0x14C],
            header_checksum=rom[0x14D],
            rom_checksum=int.from_bytes(rom[0x14E:0x150], "big"),
        )

    @property
    def entry_is_normal(self) -> bool:
        return self.entry == NORMAL_ENTRY

    @property
    def logo_ok(self) -> bool:
        return self.logo == NINTENDO_LOGO

    @property
    def title_text(self) -> str:
        return _c_string(self.title)

    @property
    def licensee_text(self) -> str:
        return _c_string(self.new_licensee_code)


def header_checksum(rom: bytes) -> int:
    """The 8-bit checksum of bytes 0134-014C as the boot ROM computes it."""
    _require_length(rom, 0x14D)
    value = 0
    for byte in rom[0x134:0x14D]:
        value = (value - byte - 1) & 0xFF
    return value


def global_checksum(rom: bytes) -> int:
    """The 16-bit sum of every ROM byte except the two checksum bytes."""
    _require_length(rom, HEADER_END)
    return (sum(rom) - rom[0x14E] - rom[0x14F]) & 0xFFFF


def load_rom(path: Union[str, "os.PathLike[str]"]) -> bytes:
    """Read a ROM image, keeping at most the first 8 MiB."""
    with open(path, "rb") as handle:
        data = handle.read(MAX_ROM_SIZE)
    if not data:
        raise ValueError("Reading cart rom failed.")
    return data


def describe(rom: bytes) -> str:
    """A line-per-field report of the header, with checksum verification."""
    header = RomHeader.from_rom(rom)
    lines = []

    if header.entry_is_normal:
        lines.append("Entry: normal")
    else:
        lines.append(f"Entry: ABONRMAL: {header.entry:08X}")

    lines.append("Logo: Nintendo (OK)" if header.logo_ok else "Logo: BAD")
    lines.append(f"Title: {header.title_text}")
    lines.append(f"New licensee code: {header.licensee_text}")

    sgb = "SGB supported" if header.sgb_flag == SGB_SUPPORTED else "no SGB support"
    lines.append(f"SGB flag: {header.sgb_flag:02X} - {sgb}")
    lines.append(f"Cartridge type: {header.cartridge_type:02X}")
    lines.append(
        f"ROM size: {header.rom_size:02X} - {rom_size_to_banks(header.rom_size)} banks"
    )
    lines.append(
        f"SRAM size: {header.ram_size:02X} - {ram_size_to_bytes(header.ram_size)} bytes"
    )
    region = "World" if header.destination else "Japan"
    lines.append(f"Destination: {header.destination:02X} - {region}")
    lines.append(f"Old licensee code: {header.old_licensee_code:02X}")
    lines.append(f"Mask ROM revision: {header.rom_version:02X}")

    computed = header_checksum(rom)
    verdict = "OK" if computed == header.header_checksum else f"BAD, should be {computed:02X}"
    lines.append(f"Header checksum: {header.header_checksum:02X}  - {verdict}")

    computed = global_checksum(rom)
    verdict = "OK" if computed == header.rom_checksum else f"BAD, should be {computed:X}"
    lines.append(f"ROM checksum: {header.rom_checksum:04X} - {verdict}")

    return "\n".join(lines)