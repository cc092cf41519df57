# tests/transport/test_bus.py
"""
array_struct_dumper.transport.busモジュールの単体テスト。
"""
import pytest

from array_struct_dumper.common.errors import HostReadError
from array_struct_dumper.transport.bus import Bus, BusAccessType, RAM, ROM, bus_reader

# @intent:test_suite ダンプ対象のアドレス空間とデバイスの検証。

class TestRAM:
    def test_ram_init(self):
        ram = RAM(16)
        assert ram.get_size() == 16
        assert all(ram.read(i) == 0 for i in range(16))
        assert RAM(4, initial_value=0xCD).read(3) == 0xCD

    # @intent:test_case_init 無効なサイズや初期値でRAMを初期化するとValueErrorが発生することを検証します。
    def test_ram_init_invalid(self):
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(0)
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(1.5)
        with pytest.raises(ValueError, match="not an 8-bit value"):
            RAM(4, initial_value=0x100)

    def test_ram_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(IndexError, match="Address 4 out of bounds for RAM of size 4."):
            ram.read(4)
        with pytest.raises(ValueError, match="Data 256 is not an 8-bit value."):
            ram.write(0, 0x100)

class TestROM:
    def test_rom_write_ignored_but_load_data_works(self):
        rom = ROM(8)
        rom.load_data(0, 0xAA)
        rom.write(0, 0xBB)
        assert rom.read(0) == 0xAA

class TestBus:
    @pytest.fixture
    def bus(self):
        bus = Bus()
        bus.register_device(0x02000000, 0x0200000F, RAM(16))
        bus.register_device(0x08000000, 0x0800000F, ROM(16))
        return bus

    # @intent:test_case_register 登録したデバイスに絶対アドレスでアクセスできることを検証します。
    def test_register_and_access(self, bus):
        bus.write(0x02000005, 0xAA)
        bus.write(0x08000001, 0x55) # ROMへのイメージロード
        assert bus.peek(0x02000005) == 0xAA
        assert bus.peek(0x08000001) == 0x55
        assert len(bus.get_memory_map()) == 2

    # @intent:test_case_unmapped マップされていないアドレスへのアクセス時にIndexErrorが発生することを検証します。
    def test_unmapped_address(self, bus):
        with pytest.raises(IndexError, match="Address 0x02000010 not mapped to any device."):
            bus.peek(0x02000010)

    # @intent:test_case_load loadはwriteと同様に書き込むが、ログには記録しないことを検証します。
    def test_load_does_not_log(self, bus):
        bus.load(0x02000002, 0x77)
        bus.load(0x08000002, 0x66) # ROM
        assert bus.get_and_clear_activity_log() == []
        assert bus.peek(0x02000002) == 0x77
        assert bus.peek(0x08000002) == 0x66

    def test_read_logs_and_peek_does_not(self, bus):
        bus.write(0x02000000, 0x11)
        bus.get_and_clear_activity_log()
        bus.peek(0x02000000)
        assert bus.get_and_clear_activity_log() == []
        assert bus.read(0x02000000) == 0x11
        log = bus.get_and_clear_activity_log()
        assert len(log) == 1
        assert log[0].access_type == BusAccessType.READ
        assert log[0].address == 0x02000000

    def test_register_invalid(self, bus):
        with pytest.raises(ValueError, match="Invalid address range"):
            bus.register_device(0x10, 0x0F, RAM(1))
        with pytest.raises(ValueError, match=r"size \(10 bytes\) does not match"):
            bus.register_device(0x0000, 0x000F, RAM(10))
        with pytest.raises(TypeError):
            bus.register_device(0x0000, 0x000F, object())

class TestBusReader:
    def test_reader_converts_unmapped_to_host_read_error(self):
        bus = Bus()
        bus.register_device(0x0000, 0x000F, RAM(16))
        read_byte = bus_reader(bus)
        assert read_byte(0x0F) == 0
        with pytest.raises(HostReadError) as excinfo:
            read_byte(0x10)
        assert excinfo.value.address == 0x10
        assert isinstance(excinfo.value, IndexError)

    def test_reader_with_access_log(self):
        bus = Bus()
        bus.register_device(0x0000, 0x000F, RAM(16))
        read_byte = bus_reader(bus, log_access=True)
        read_byte(0x01)
        read_byte(0x02)
        assert [a.address for a in bus.get_and_clear_activity_log()] == [0x01, 0x02]
