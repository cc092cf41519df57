# array_struct_dumper/decoder/struct_reader.py
"""
構造体1個分のフィールドを宣言順に読み出すモジュール。
"""
import logging
from typing import List, Tuple

from array_struct_dumper.common.types import Endianness, ReadByte, RenderedLine
from array_struct_dumper.schema.compiler import StructLayout
from array_struct_dumper.decoder.field_decoder import decode_field

log = logging.getLogger(__name__)

# @intent:responsibility レイアウトの全フィールドにdecode_fieldを適用し、構造体直後のアドレスと出力行を返します。
# @intent:post-condition 返されるアドレスは base_address + layout.total_size と一致します。
def read_struct(
    read_byte: ReadByte,
    base_address: int,
    layout: StructLayout,
    endianness: Endianness,
    legacy_rendering: bool = False,
) -> Tuple[int, List[RenderedLine]]:
    current_address = base_address
    lines: List[RenderedLine] = []

    for field_spec in layout.fields:
        current_address, line = decode_field(
            read_byte, current_address, field_spec, endianness, legacy_rendering
        )
        if line:
            lines.append(line)

    log.debug("Read struct at %#010x (%d bytes, %d lines)", base_address, layout.total_size, len(lines))
    return current_address, lines
