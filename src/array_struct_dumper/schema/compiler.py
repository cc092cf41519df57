# array_struct_dumper/schema/compiler.py
"""
Schema Layer (構造体レイアウト)

このモジュールは、順序付きのフィールド定義を検証し、各フィールドの累積オフセットと
構造体全体のサイズを持つ不変のレイアウトに変換する責務を負います。
"""
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from array_struct_dumper.common.errors import ConfigurationError
from array_struct_dumper.common.types import FieldSpec, SkipField, DataField, SKIP_NAME

# @intent:responsibility コンパイル済みの構造体レイアウトを保持します。
@dataclass(frozen=True) # 不変データ構造
class StructLayout:
    """
    宣言順に並んだフィールドと、そこから導出される total_size / offsets を保持するデータクラス。
    宣言順がそのままメモリ上の順序になります。
    """
    fields: Tuple[FieldSpec, ...]
    offsets: Tuple[int, ...]
    total_size: int

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def data_fields(self) -> List[DataField]:
        return [f for f in self.fields if isinstance(f, DataField)]

    # @intent:responsibility レイアウトを「オフセット サイズ 名前」形式の表として返します。
    def describe(self) -> List[str]:
        lines = []
        for offset, field_spec in zip(self.offsets, self.fields):
            name = field_spec.name if isinstance(field_spec, DataField) else f"<{SKIP_NAME}>"
            lines.append(f"{offset:#06x} {field_spec.size:>4}  {name}")
        lines.append(f"total size: {self.total_size} bytes")
        return lines

# @intent:responsibility フィールド定義を検証し、StructLayoutを生成します。
# @intent:pre-condition 全てのフィールドのサイズは0以上の整数である必要があります。
def compile_layout(fields: Iterable[FieldSpec]) -> StructLayout:
    """
    順序付きのフィールド列からStructLayoutを生成します。
    負のサイズ、名前のないデータフィールドはConfigurationErrorとなります。
    """
    field_list = tuple(fields)
    offsets = []
    cursor = 0

    for index, field_spec in enumerate(field_list):
        if not isinstance(field_spec, (SkipField, DataField)):
            raise ConfigurationError(f"Field #{index} is not a field specification: {field_spec!r}")
        if isinstance(field_spec.size, bool) or not isinstance(field_spec.size, int):
            raise ConfigurationError(f"Field #{index} size must be an integer, got {field_spec.size!r}.")
        if field_spec.size < 0:
            raise ConfigurationError(f"Field #{index} has negative size {field_spec.size}.")
        if isinstance(field_spec, DataField):
            if not field_spec.name:
                raise ConfigurationError(f"Field #{index} must have a name.")
            if field_spec.name == SKIP_NAME:
                # "skip" はSkipFieldとしてのみ表現する
                raise ConfigurationError(f"Field #{index} uses the reserved name '{SKIP_NAME}'.")

        offsets.append(cursor)
        cursor += field_spec.size

    return StructLayout(fields=field_list, offsets=tuple(offsets), total_size=cursor)

# @intent:utility_function 設定ファイル由来の (name, size) 組をFieldSpecに変換します。
def field_from_pair(name: str, size: int) -> FieldSpec:
    if name == SKIP_NAME:
        return SkipField(size)
    return DataField(name, size)
