"""
共通の型定義を提供するモジュール。
フィールド定義、バイトオーダー、インデックス表示形式など、
プロジェクト全体で使用される型を定義します。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

# @intent:data_structure ホスト環境のバイト読み出しプリミティブの型エイリアス。
# 絶対アドレスを受け取り、0〜255の値を返します。
ReadByte = Callable[[int], int]

# @intent:data_structure 出力の1行。構造体ヘッダまたはフィールド行のいずれか。
RenderedLine = str

# 設定ファイル上で区切り（スキップ）フィールドを表す予約名
SKIP_NAME = "skip"

# @intent:responsibility 複数バイト値を表示する際のバイトオーダーを定義します。
class Endianness(Enum):
    BIG = "big"
    LITTLE = "little"

# @intent:responsibility 出力時のインデックス表示形式を定義します。
# @intent:rationale 表示上のオフセットのみに影響し、アドレス計算には一切関与しません。
class IndexStyle(Enum):
    LUA = "lua"  # struct_1 が先頭
    C = "c"      # struct_0 が先頭

    @property
    def offset(self) -> int:
        return 1 if self is IndexStyle.C else 0

# @intent:data_structure 読み飛ばすだけで出力を持たない区切りフィールド。
@dataclass(frozen=True)
class SkipField:
    size: int

# @intent:data_structure 名前を持ち、16進数として出力されるデータフィールド。
@dataclass(frozen=True)
class DataField:
    name: str
    size: int

FieldSpec = Union[SkipField, DataField]
