# tests/loader/test_image_loader.py
"""
array_struct_dumper.loader.loaderモジュールの単体テスト。
生バイナリ、Intel HEX、S-Recordのロード機能を検証します。
"""
import pytest

from array_struct_dumper.transport.bus import Bus, RAM
from array_struct_dumper.loader.loader import BinaryImageLoader, IntelHexLoader, SRecordLoader

# @intent:test_suite メモリイメージローダーの検証。

@pytest.fixture
def setup_bus():
    bus = Bus()
    ram = RAM(0x20000)
    bus.register_device(0x0000, 0x1FFFF, ram)
    return bus, ram

class TestBinaryImageLoader:
    def test_load_binary_at_address(self, setup_bus, tmp_path):
        bus, ram = setup_bus
        image = tmp_path / "dump.bin"
        image.write_bytes(bytes([0xDE, 0xAD, 0xBE, 0xEF]))

        loaded = BinaryImageLoader().load_binary(str(image), bus, 0x0100)

        assert loaded == 4
        assert [ram.read(0x100 + i) for i in range(4)] == [0xDE, 0xAD, 0xBE, 0xEF]

    def test_missing_file_raises(self, setup_bus, tmp_path):
        bus, _ = setup_bus
        with pytest.raises(OSError):
            BinaryImageLoader().load_binary(str(tmp_path / "missing.bin"), bus)

class TestIntelHexLoader:
    def test_load_simple_hex_data(self, setup_bus, tmp_path):
        bus, ram = setup_bus
        hex_file = tmp_path / "simple.hex"
        hex_file.write_text(
            ":020000001234B8\n"
            ":02000200ABCD84\n"
            ":00000001FF\n"
        )

        assert IntelHexLoader().load_intel_hex(str(hex_file), bus) == 4

        assert [ram.read(i) for i in range(4)] == [0x12, 0x34, 0xAB, 0xCD]

    # @intent:test_case_ela 拡張リニアアドレスレコードが上位16bitに反映されることを検証します。
    def test_load_extended_linear_address(self, setup_bus, tmp_path):
        bus, ram = setup_bus
        hex_file = tmp_path / "ela.hex"
        hex_file.write_text(
            ":020000040001F9 ; upper address 0x0001\n"
            ":021000001234A8\n"
            ":00000001FF\n"
        )

        IntelHexLoader().load_intel_hex(str(hex_file), bus)

        assert ram.read(0x11000) == 0x12
        assert ram.read(0x11001) == 0x34

    def test_invalid_checksum(self, setup_bus, tmp_path):
        bus, _ = setup_bus
        hex_file = tmp_path / "bad.hex"
        hex_file.write_text(":020000001234B9\n")
        with pytest.raises(ValueError, match="Checksum mismatch on line 1"):
            IntelHexLoader().load_intel_hex(str(hex_file), bus)

    def test_unknown_record_type(self, setup_bus, tmp_path):
        bus, _ = setup_bus
        hex_file = tmp_path / "unknown.hex"
        hex_file.write_text(":0000000AF6\n")
        with pytest.raises(ValueError, match="Unknown Intel HEX record type 0A"):
            IntelHexLoader().load_intel_hex(str(hex_file), bus)

class TestSRecordLoader:
    def test_load_s1_record(self, setup_bus, tmp_path):
        bus, ram = setup_bus
        srec = tmp_path / "prog.s19"
        srec.write_text(
            "S00600004844521B\n"
            "S1070100DEADBEEFBF\n"
            "S9030000FC\n"
        )

        assert SRecordLoader().load_srecord(str(srec), bus) == 4

        assert [ram.read(0x100 + i) for i in range(4)] == [0xDE, 0xAD, 0xBE, 0xEF]

    def test_checksum_mismatch(self, setup_bus, tmp_path):
        bus, _ = setup_bus
        srec = tmp_path / "bad.s19"
        srec.write_text("S1070100DEADBEEFC0\n")
        with pytest.raises(ValueError, match="S-Record checksum mismatch on line 1"):
            SRecordLoader().load_srecord(str(srec), bus)
