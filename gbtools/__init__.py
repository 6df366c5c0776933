"""Game Boy cartridge mappers, ROM header tools, joypad input and band-limited sound synthesis."""

__version__ = "0.1.0"