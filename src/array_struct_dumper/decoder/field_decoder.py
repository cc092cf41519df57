# array_struct_dumper/decoder/field_decoder.py
"""
Decoder Layer (フィールドデコーダ)

このモジュールは、単一フィールドのバイト列をホストから読み出し、
指定されたバイトオーダーに従って固定幅の16進数文字列に変換する責務を負います。
"""
from typing import List, Optional, Sequence, Tuple

from array_struct_dumper.common.errors import HostReadError
from array_struct_dumper.common.types import (
    DataField,
    Endianness,
    FieldSpec,
    ReadByte,
    RenderedLine,
    SkipField,
)

FIELD_INDENT = "  "

# @intent:responsibility バイト列をバイトオーダーに従って16進数文字列に変換します。
def render_hex(data: Sequence[int], endianness: Endianness) -> str:
    """
    BIG: 低位アドレスのバイトから順に連結します。
    LITTLE: 高位アドレスのバイトから順に連結します。
    1バイトにつき小文字2桁、ゼロ埋めです。
    """
    ordered = data if endianness is Endianness.BIG else list(reversed(data))
    return "".join(f"{b:02x}" for b in ordered)

# @intent:responsibility render_hexの逆変換。アドレス昇順のバイト列を復元します。
def parse_hex(text: str, endianness: Endianness) -> bytes:
    if len(text) % 2 != 0:
        raise ValueError(f"Hex string must have an even number of digits: {text!r}")
    data = bytes.fromhex(text)
    return data if endianness is Endianness.BIG else data[::-1]

# @intent:responsibility 元のツールのバイト描画ループの挙動（最後に処理した1バイトのみが残る）を再現します。
# @intent:rationale 元のツールは各反復で文字列を連結せず上書きしていたため、
#                  出力は「最後に処理したバイト」を 2*size 桁でゼロ埋めしたものになります。
#                  BIGでは最高位アドレス、LITTLEでは最低位アドレスのバイトが最後に処理されます。
def render_hex_legacy(data: Sequence[int], endianness: Endianness) -> str:
    if not data:
        return ""
    last = data[-1] if endianness is Endianness.BIG else data[0]
    return f"{last:0{len(data) * 2}x}"

# @intent:responsibility 指定アドレスから連続したバイトを1バイトずつ読み出します。
def read_bytes(read_byte: ReadByte, address: int, size: int) -> List[int]:
    data = []
    for addr in range(address, address + size):
        try:
            value = read_byte(addr)
        except HostReadError:
            raise
        except IndexError as e:
            raise HostReadError(addr, str(e)) from e
        data.append(value & 0xFF)
    return data

# @intent:responsibility 1フィールド分を処理し、次のアドレスと出力行（スキップ時はNone）を返します。
# @intent:pre-condition field_specはコンパイル済みレイアウト由来であり、サイズは0以上です。
# @intent:post-condition 返されるアドレスは常に base_address + field_spec.size です。
def decode_field(
    read_byte: ReadByte,
    base_address: int,
    field_spec: FieldSpec,
    endianness: Endianness,
    legacy_rendering: bool = False,
) -> Tuple[int, Optional[RenderedLine]]:
    """
    SkipFieldであればバイトを読まずにアドレスのみ進めます。
    DataFieldであれば size バイトを読み出し、"  name: hex" 形式の行を返します。
    """
    next_address = base_address + field_spec.size

    if isinstance(field_spec, SkipField):
        return next_address, None

    if not isinstance(field_spec, DataField):
        raise TypeError(f"Unsupported field specification: {field_spec!r}")

    data = read_bytes(read_byte, base_address, field_spec.size)
    if legacy_rendering:
        hex_string = render_hex_legacy(data, endianness)
    else:
        hex_string = render_hex(data, endianness)

    return next_address, f"{FIELD_INDENT}{field_spec.name}: {hex_string}"
