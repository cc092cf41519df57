# array_struct_dumper/loader/loader.py
"""
メモリイメージローダーモジュール。
生バイナリ、Intel HEX、Motorola S-Record 形式のダンプをバスに展開します。
"""
import logging
from pathlib import Path
from typing import List, Union

from array_struct_dumper.transport.bus import Bus

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

# @intent:utility_function 16進数2桁ずつの文字列をバイト値のリストに変換します。
def _hex_pairs(text: str) -> List[int]:
    return [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]

class BinaryImageLoader:
    """
    生のメモリダンプ（エミュレータのRAMダンプなど）を指定アドレスから書き込むローダー。
    """
    def load_binary(self, file_path: PathLike, bus: Bus, address: int = 0) -> int:
        data = Path(file_path).read_bytes()
        for i, byte_data in enumerate(data):
            bus.load(address + i, byte_data)
        log.debug("Loaded %d bytes from %s at %#010x", len(data), file_path, address)
        return len(data)

class IntelHexLoader:
    """
    Intel HEX形式のファイルを解析し、データをバスにロードするローダー。
    """
    def load_intel_hex(self, file_path: PathLike, bus: Bus) -> int:
        base_address = 0x0000
        loaded = 0

        with open(file_path, 'r') as f:
            for line_num, line in enumerate(f, 1):
                line = line.split(';', 1)[0].strip()
                if not line.startswith(':'):
                    continue
                if len(line) < 11:
                    raise ValueError(f"Invalid Intel HEX record on line {line_num}: too short - {line}")

                try:
                    record = _hex_pairs(line[1:])
                except ValueError as e:
                    raise ValueError(f"Error parsing Intel HEX line {line_num}: {line} - {e}") from e

                data_length = record[0]
                if len(record) != data_length + 5:
                    raise ValueError(f"Data length mismatch on line {line_num}")
                if sum(record) & 0xFF != 0:
                    # 全バイトの総和（チェックサム含む）は 0 mod 256 となる
                    expected = (-sum(record[:-1])) & 0xFF
                    raise ValueError(
                        f"Checksum mismatch on line {line_num}: Calculated {expected:02X}, Expected {record[-1]:02X}"
                    )

                offset = (record[1] << 8) | record[2]
                record_type = record[3]
                payload = record[4:-1]

                if record_type == 0x00:
                    for i, byte_data in enumerate(payload):
                        bus.load((base_address + offset + i) & 0xFFFFFFFF, byte_data)
                    loaded += len(payload)
                elif record_type == 0x01:
                    break
                elif record_type == 0x02:
                    base_address = ((payload[0] << 8) | payload[1]) << 4
                elif record_type == 0x04:
                    base_address = ((payload[0] << 8) | payload[1]) << 16
                elif record_type in (0x03, 0x05):
                    # 開始アドレスレコードはダンプには無関係
                    continue
                else:
                    raise ValueError(f"Unknown Intel HEX record type {record_type:02X} on line {line_num}")

        log.debug("Loaded %d bytes from Intel HEX %s", loaded, file_path)
        return loaded

class SRecordLoader:
    """
    Motorola S-Record (S19, S28, S37) 形式のファイルを解析し、データをバスにロードするローダー。
    """
    ADDRESS_BYTES = {'1': 2, '2': 3, '3': 4}

    def load_srecord(self, file_path: PathLike, bus: Bus) -> int:
        loaded = 0

        with open(file_path, 'r') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line.startswith('S') or len(line) < 4:
                    continue

                record_type = line[1]
                try:
                    record = _hex_pairs(line[2:])
                except ValueError as e:
                    raise ValueError(f"Error parsing S-Record line {line_num}: {e}") from e

                count = record[0]
                if len(record) != count + 1:
                    raise ValueError(f"S-Record length mismatch on line {line_num}")
                if (~sum(record[:-1])) & 0xFF != record[-1]:
                    raise ValueError(f"S-Record checksum mismatch on line {line_num}")

                addr_len = self.ADDRESS_BYTES.get(record_type)
                if addr_len is None:
                    continue

                address = int.from_bytes(bytes(record[1:1 + addr_len]), 'big')
                payload = record[1 + addr_len:-1]
                for i, byte_data in enumerate(payload):
                    bus.load(address + i, byte_data)
                loaded += len(payload)

        log.debug("Loaded %d bytes from S-Record %s", loaded, file_path)
        return loaded
