"""Pseudo-controller that overlays the boot ROM during start-up."""

from __future__ import annotations

from gbtools.cartridge import MemoryBankController


class BootMBC(MemoryBankController):
    """Exposes the boot ROM over the low cartridge addresses; ignores writes."""

    def install(self) -> None:
        super().install()
        self.map_read(0x0000, 0x3FFF, self._read_boot_bank_0)
        self.map_write(0x0000, 0x7FFF, self._ignore_write)

    def _read_boot_bank_0(self, address: int) -> int:
        if address < 0x100 or 0x200 <= address < 0x900:
            return self.cart.bootrom[address]
        return self.cart.rom[address]