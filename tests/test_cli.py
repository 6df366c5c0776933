from gbtools.cli import COMMANDS, cmd_help, cmd_info, main, print_usage
from gbtools.header import NINTENDO_LOGO, global_checksum, header_checksum


def write_rom(path):
    rom = bytearray(0x8000)
    rom[0x100:0x104] = bytes.fromhex("00c35001")
    rom[0x104:0x134] = NINTENDO_LOGO
    rom[0x134:0x13C] = b"TESTGAME"
    rom[0x14D] = header_checksum(rom)
    rom[0x14E:0x150] = global_checksum(rom).to_bytes(2, "big")
    path.write_bytes(bytes(rom))
    return path


def test_main_without_arguments_prints_usage(capsys):
    assert main([]) == 1
    out = capsys.readouterr().out
    assert out.startswith("usage:")
    for cmd in COMMANDS:
        assert f"\t{cmd.name}\t{cmd.help_short}" in out


def test_print_usage_lists_commands(capsys):
    print_usage()
    out = capsys.readouterr().out
    assert "The available commands are:" in out
    assert "help <command>" in out


def test_main_unknown_command(capsys):
    assert main(["bogus"]) == 1
    assert "'bogus' is not a command." in capsys.readouterr().out


def test_help_for_command(capsys):
    assert main(["help", "info"]) == 0
    out = capsys.readouterr().out
    assert out == "info <romfile>\n\tprint meaning of header fields in romfile\n"


def test_help_unknown(capsys):
    assert cmd_help(["nothing"]) == 1
    assert capsys.readouterr().out == "No command nothing\n"


def test_help_without_argument(capsys):
    assert cmd_help([]) == 1
    assert "help <command>" in capsys.readouterr().err


def test_info_without_argument(capsys):
    assert cmd_info([]) == 1
    assert capsys.readouterr().err == "need an argument\n"


def test_info_missing_file(tmp_path, capsys):
    missing = tmp_path / "nope.gb"
    assert main(["info", str(missing)]) == 1
    assert f"Couldn't stat file: {missing}" in capsys.readouterr().err


def test_info_empty_file(tmp_path, capsys):
    path = tmp_path / "empty.gb"
    path.write_bytes(b"")
    assert cmd_info([str(path)]) == 1
    assert "Reading cart rom failed." in capsys.readouterr().err


def test_info_short_file(tmp_path, capsys):
    path = tmp_path / "short.gb"
    path.write_bytes(bytes(0x20))
    assert cmd_info([str(path)]) == 1
    assert "Reading cart rom failed" in capsys.readouterr().err


def test_info_valid_rom(tmp_path, capsys):
    path = write_rom(tmp_path / "game.gb")
    assert main(["info", str(path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Entry: normal"
    assert lines[1] == "Logo: Nintendo (OK)"
    assert lines[2] == "Title: TESTGAME"
    assert lines[-2].endswith(" - OK")
    assert lines[-1].endswith(" - OK")