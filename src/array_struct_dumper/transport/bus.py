# array_struct_dumper/transport/bus.py
"""
Transport Layer (アドレス空間)

このモジュールは、ダンプ対象となるメモリアドレス空間を抽象化し、
1バイト単位の読み出しを適切なデバイスに委譲する責務を負います。
デコーダから見た「ホストのバイト読み出しプリミティブ」はこのバスが提供します。
"""
from abc import ABC, abstractmethod
from typing import List, Tuple
from dataclasses import dataclass
from enum import Enum

from array_struct_dumper.common.errors import HostReadError
from array_struct_dumper.common.types import ReadByte

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    バス上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 8bit value
    access_type: BusAccessType

# @intent:responsibility バスの抽象デバイスインターフェースを定義します。
class Device(ABC):
    """
    バスに接続されるデバイスの抽象基底クラス。
    アドレスはデバイス内でのオフセットとして扱われます。
    """
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

# @intent:responsibility メモリイメージを保持する基本的なRAMデバイス。
class RAM(Device):
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int, initial_value: int = 0x00):
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        if not 0 <= initial_value <= 0xFF:
            raise ValueError(f"Initial value {initial_value} is not an 8-bit value.")
        self._memory = bytearray([initial_value]) * size
        self._size = size

    def read(self, address: int) -> int:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")
        return self._memory[address]

    def write(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    def get_size(self) -> int:
        return self._size

# @intent:responsibility 読み込み専用メモリ(ROM)の機能を提供します。
class ROM(RAM):
    """
    読み込み専用メモリデバイス。通常の書き込みは無視されます。
    イメージのロードには load_data を使用します。
    """
    def write(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for ROM of size {self._size}.")

    # @intent:responsibility ROMの内容を初期化するためのバックドアメソッドです。
    def load_data(self, address: int, data: int) -> None:
        super().write(address, data)

# @intent:responsibility メモリアドレス空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
class Bus:
    """
    メモリアドレス空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
    readはアクセスをログに記録し、peekは記録しません。
    """
    def __init__(self):
        # メモリマップ: (start_address, end_address, device) のタプルリスト
        self._memory_map: List[Tuple[int, int, Device]] = []
        self._bus_activity_log: List[BusAccess] = []

    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 指定されたアドレス範囲にデバイスを登録します。
    # @intent:pre-condition start_address <= end_addressかつ非負であり、deviceはDeviceのインスタンスである必要があります。
    # @intent:rationale アドレス範囲の重複チェックは行いません。先に登録されたデバイスが優先されます。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address):
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        if isinstance(device, RAM):
            expected_size = end_address - start_address + 1
            if device.get_size() != expected_size:
                raise ValueError(
                    f"Registered {type(device).__name__} device size ({device.get_size()} bytes) does not match "
                    f"the specified address range size ({expected_size} bytes)."
                )

        self._memory_map.append((start_address, end_address, device))

    def get_memory_map(self) -> List[Tuple[int, int, Device]]:
        return list(self._memory_map)

    # @intent:post-condition デバイスが見つからなかった場合、IndexErrorを発生させます。
    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise IndexError(f"Address {address:#010x} not mapped to any device.")

    def read(self, address: int) -> int:
        device, offset = self._find_device(address)
        data = device.read(offset)
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        device, offset = self._find_device(address)
        return device.read(offset)

    # @intent:responsibility 書き込み。ROMであれば load_data に委譲し、アクセスを記録します。
    def write(self, address: int, data: int) -> None:
        self.load(address, data)
        self._log_access(address, data, BusAccessType.WRITE)

    # @intent:responsibility イメージローダー用の書き込み。アクセスログには記録しません。
    # @intent:rationale イメージ全体をロードするとバイト数分のBusAccessが残るため、peekと対になる経路を用意します。
    def load(self, address: int, data: int) -> None:
        device, offset = self._find_device(address)

        if isinstance(device, ROM):
            device.load_data(offset, data)
        else:
            device.write(offset, data)

# @intent:responsibility バスをデコーダ用のバイト読み出しプリミティブに適合させます。
# @intent:rationale 未マップアドレスのIndexErrorをHostReadErrorに変換し、デコーダ側の例外を統一します。
def bus_reader(bus: Bus, log_access: bool = False) -> ReadByte:
    """
    log_access=Trueの場合はBus.read（アクセスログあり）、そうでなければBus.peekを使用します。
    """
    read = bus.read if log_access else bus.peek

    def read_byte(address: int) -> int:
        try:
            return read(address)
        except IndexError as e:
            raise HostReadError(address, str(e)) from e

    return read_byte
