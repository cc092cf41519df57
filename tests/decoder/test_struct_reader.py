# tests/decoder/test_struct_reader.py
"""
array_struct_dumper.decoder.struct_readerモジュールの単体テスト。
"""
import pytest

from array_struct_dumper.common.types import DataField, Endianness, SkipField
from array_struct_dumper.decoder import read_struct
from array_struct_dumper.schema.compiler import compile_layout
from array_struct_dumper.transport.bus import Bus, RAM, bus_reader

# @intent:test_suite 構造体1個分の読み出しを検証します。

class TestReadStruct:
    @pytest.fixture
    def setup_reader(self):
        bus = Bus()
        bus.register_device(0x0000, 0x00FF, RAM(0x100))
        for i in range(0x20):
            bus.write(i, i)
        layout = compile_layout([
            DataField("x_start", 2),
            DataField("y_start", 2),
            SkipField(4),
            DataField("is_invalid", 1),
            SkipField(3),
        ])
        return bus_reader(bus), layout

    # @intent:test_case_next_address 返されるアドレスが base + total_size と一致することを検証します。
    def test_returns_address_past_struct(self, setup_reader):
        read_byte, layout = setup_reader
        next_address, _ = read_struct(read_byte, 0x04, layout, Endianness.BIG)
        assert next_address == 0x04 + layout.total_size

    def test_lines_in_declaration_order_without_skips(self, setup_reader):
        read_byte, layout = setup_reader
        _, lines = read_struct(read_byte, 0x00, layout, Endianness.BIG)
        assert lines == [
            "  x_start: 0001",
            "  y_start: 0203",
            "  is_invalid: 08",
        ]

    def test_little_endian_struct(self, setup_reader):
        read_byte, layout = setup_reader
        _, lines = read_struct(read_byte, 0x10, layout, Endianness.LITTLE)
        assert lines == [
            "  x_start: 1110",
            "  y_start: 1312",
            "  is_invalid: 18",
        ]

    # @intent:test_case_stateless 同じ入力に対して常に同じ結果を返すことを検証します。
    def test_repeated_calls_are_independent(self, setup_reader):
        read_byte, layout = setup_reader
        assert read_struct(read_byte, 0x00, layout, Endianness.BIG) == read_struct(read_byte, 0x00, layout, Endianness.BIG)

    def test_skip_only_layout_produces_no_lines(self, setup_reader):
        read_byte, _ = setup_reader
        layout = compile_layout([SkipField(8)])
        assert read_struct(read_byte, 0x00, layout, Endianness.BIG) == (8, [])
