# gbtools

Building blocks for a Game Boy emulator, in pure Python with no dependencies.

## What is included

- **Cartridge mappers** (`gbtools.cartridge` and one module per mapper).
  - A `Cartridge` holds the ROM image, the external RAM, the boot ROM and the cartridge type.
  - The `MemoryBankController` subclasses map the cartridge into the 16-bit address space through `read(address)` and `write(address, data)`:
    - `NoMBC` for plain ROM,
    - `BootMBC` for the boot-ROM overlay,
    - `MBC1`, `MBC2`, `MBC3`, `MBC5` and `MBC7`,
    - `HuC1` and `HuC3`,
    - `CameraMBC` for the camera cartridge.
  - `rom_size_to_banks` and `ram_size_to_bytes` decode the size bytes of the header.
- **ROM header inspection** (`gbtools.header`).
  - `load_rom` reads at most the first 8 MiB of a file.
  - `RomHeader.from_rom` parses the header at 0100-014F.
  - `header_checksum` and `global_checksum` compute the two checksums.
  - `describe(rom)` returns a report with one line per field.
- **Joypad input** (`gbtools.joypad`).
  - `Joypad` keeps the active-low button and direction rows.
  - `Button` names the eight inputs.
  - `InputHandler` turns key names into joypad changes and stop/pause flags:
    - `return`, `tab`, `s`, `a` and the arrow keys are joypad inputs,
    - `escape` or `q` stops,
    - `p` toggles pause.
- **Sound synthesis.**
  - `gbtools.blip_buffer`: `BlipBuffer` is a band-limited sample buffer. The same module has `BlipReader`, `BlipImpulse` and `EqualizerParams`.
  - `gbtools.blip_synth`: `BlipSynth` and `BlipWave` add transitions to a buffer.
  - `gbtools.multi_buffer`: `MonoBuffer`, `StereoBuffer` and `SilentBuffer` give mono or interleaved stereo output.
  - `gbtools.oscillators`: the `Square`, `Wave` and `Noise` channel oscillators, built on `Oscillator` and `Envelope`. Each one writes into a `BlipBuffer` through a `BlipSynth`.

## Installation

```
pip install .
```

## Command line

```
gbtools help <command>     # get help for a command
gbtools info <romfile>     # print the meaning of the header fields in romfile
```

Run `gbtools` with no arguments to list the available commands.

## Library use

```python
from gbtools.cartridge import Cartridge
from gbtools.mbc1 import MBC1
from gbtools.header import load_rom, describe

rom = load_rom("game.gb")
print(describe(rom))

mbc = MBC1(Cartridge(rom))   # the mapper installs itself on construction
mbc.write(0x2000, 0x02)      # select ROM bank 2
value = mbc.read(0x4000)     # read from the switchable bank
```

Sound output:

```python
from gbtools.blip_synth import GOOD_QUALITY, BlipSynth
from gbtools.multi_buffer import StereoBuffer

buf = StereoBuffer()
buf.set_sample_rate(44100)
buf.set_clock_rate(4194304)

synth = BlipSynth(GOOD_QUALITY, 210, volume=0.5)
synth.output = buf.center
synth.offset(1000, 100)           # step up by 100 at clock 1000
synth.offset(20000, -100)         # and back down

buf.end_frame(70224, added_stereo=False)
samples = buf.read_samples(2048)  # interleaved left/right pairs
```

## What it does not do

This package does not run games. It has no CPU, video or timer emulation and no `run` command. It also has no sound-chip object that decodes the 0xFF10-0xFF3F register writes and clocks the four oscillators: you drive `Square`, `Wave` and `Noise` yourself. Keyboard events must come from your own event loop, passed to `InputHandler` as key names.

## Tests

```
pip install .[test]
pytest
```