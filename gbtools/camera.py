"""Memory bank controller of the camera cartridge."""

from __future__ import annotations

from gbtools.cartridge import EXTRAM_BANK_SIZE, ROM_BANK_SIZE, MemoryBankController

CAM_MODE_SELECT = 0x10
CAPTURE_COMMAND = 0x03
CAPTURE_REGISTER = 0xA000
BOOT_CAPTURES = 140

_PHOTO_OFFSET = 0x0100
_TILES_X = 16
_TILES_Y = 14
_ROWS_PER_TILE = 8

# (high plane, low plane) for each step of the test pattern.
_PATTERN = (
    (0x00, 0x00),
    (0x00, 0xFF),
    (0xFF, 0x00),
    (0xFF, 0xFF),
    (0xFF, 0x00),
    (0x00, 0xFF),
)


class CameraMBC(MemoryBankController):
    """Camera cartridge: banked ROM and RAM plus a register window.

    Writing 0x10 to 4000-5FFF maps the camera registers over A000-BFFF;
    any other value maps RAM bank ``data & 0x0F`` there.  The sensor is
    not modelled: a capture request fills photo RAM with a test pattern.
    """

    def install(self) -> None:
        super().install()
        self.extram_bank_num = 0
        self.cam_mode = False
        self.pics_taken = 0
        self.map_write(0x0000, 0x1FFF, self._ignore_write)
        self.map_write(0x2000, 0x3FFF, self._write_rom_bank_select)
        self.map_write(0x4000, 0x5FFF, self._write_extram_bank_select)
        self.map_write(0x6000, 0x7FFF, self._ignore_write)
        self.map_read(0xA000, 0xBFFF, self._read_cam_extram)
        self.map_write(0xA000, 0xBFFF, self._write_cam_extram)

    def _write_rom_bank_select(self, address: int, data: int) -> None:
        rombank = data or 1
        self.rom_bank_offset = (rombank * ROM_BANK_SIZE) % self.cart.rom_size

    def _write_extram_bank_select(self, address: int, data: int) -> None:
        if data == CAM_MODE_SELECT:
            self.cam_mode = True
            return
        self.cam_mode = False
        self.extram_bank_num = data & 0x0F
        self.extram_bank_offset = self.extram_bank_num * EXTRAM_BANK_SIZE

    def _read_cam_extram(self, address: int) -> int:
        if not self.cam_mode:
            return self._read_extram(address)
        return 0

    def _write_cam_extram(self, address: int, data: int) -> None:
        if not self.cam_mode:
            self._write_extram(address, data)
            return
        if address == CAPTURE_REGISTER and data == CAPTURE_COMMAND:
            self.pics_taken += 1
            # The game requests a burst of captures while booting; skip them.
            if self.pics_taken > BOOT_CAPTURES:
                self._fill_photo_ram()

    def _fill_photo_ram(self) -> None:
        offset = _PHOTO_OFFSET
        extram = self.cart.extram
        for tile_y in range(_TILES_Y):
            for tile_x in range(_TILES_X):
                high, low = _PATTERN[(tile_x + tile_y + self.pics_taken) % len(_PATTERN)]
                row = bytes((low, high))
                extram[offset:offset + 2 * _ROWS_PER_TILE] = row * _ROWS_PER_TILE
                offset += 2 * _ROWS_PER_TILE