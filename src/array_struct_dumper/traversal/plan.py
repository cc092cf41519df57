# array_struct_dumper/traversal/plan.py
"""
Traversal Layer (配列走査エンジン)

このモジュールは、構造体配列（1次元または2次元）の各要素の座標を列挙し、
それぞれのベースアドレスで構造体を読み出す責務を負います。
1次元と2次元は同一の TraversalPlan 抽象の2つの実装として表現され、
構造体の読み出しは共通のドライバ traverse() が行います。
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from array_struct_dumper.common.errors import ConfigurationError
from array_struct_dumper.common.types import Endianness, IndexStyle, ReadByte, RenderedLine
from array_struct_dumper.schema.compiler import StructLayout
from array_struct_dumper.decoder.struct_reader import read_struct

log = logging.getLogger(__name__)

# @intent:responsibility 走査中に読み出した構造体1個分の結果を記録します。
@dataclass(frozen=True) # 不変データ構造
class StructRecord:
    """
    構造体の座標（1次元なら (i,)、2次元なら (x, y)）、ベースアドレス、出力行を保持します。
    """
    coordinates: Tuple[int, ...]
    base_address: int
    label: str
    lines: List[RenderedLine] = field(default_factory=list)

    def header(self) -> RenderedLine:
        return f"{self.label} @ {self.base_address:08x}"

# @intent:utility_function 設定値が整数であることを検証します。
def _require_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}.")
    return value

# @intent:responsibility 走査計画の抽象インターフェースを定義します。
class TraversalPlan(ABC):
    """
    座標の列挙と、外側ループ1周ごとのアドレス補正を定義する抽象基底クラス。
    アドレスの前進そのもの（構造体サイズ分）はドライバ側が行います。
    """
    base_address: int

    # @intent:responsibility 構成値を検証します。不正な場合はConfigurationErrorを送出します。
    def validate(self) -> None:
        _require_int("base_address", self.base_address)
        if self.base_address < 0:
            raise ConfigurationError(f"base_address must be non-negative, got {self.base_address}.")

    # @intent:responsibility 外側ループ（行）ごとに、その行で訪問する座標のリストを返します。
    @abstractmethod
    def rows(self) -> Iterator[List[Tuple[int, ...]]]:
        pass

    # @intent:responsibility 1行を読み終えた後に読み飛ばす構造体スロット数を返します。
    @abstractmethod
    def post_row_skip(self) -> int:
        pass

    def coordinates(self) -> Iterator[Tuple[int, ...]]:
        for row in self.rows():
            yield from row

    def count(self) -> int:
        return sum(len(row) for row in self.rows())

    def label(self, coordinates: Tuple[int, ...], index_style: IndexStyle) -> str:
        return "struct_" + "_".join(str(c - index_style.offset) for c in coordinates)

# @intent:responsibility 1次元配列（線形に並んだ構造体）の走査計画。
@dataclass(frozen=True)
class LinearPlan(TraversalPlan):
    base_address: int
    index_start: int
    index_end: int

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        super().validate()
        _require_int("index_start", self.index_start)
        _require_int("index_end", self.index_end)

    def rows(self) -> Iterator[List[Tuple[int, ...]]]:
        # 1次元では全体を1行として扱う
        yield [(i,) for i in range(self.index_start, self.index_end + 1)]

    def post_row_skip(self) -> int:
        return 0

# @intent:responsibility 2次元配列（行の一部のみを読み出す矩形グリッド）の走査計画。
# @intent:rationale 内側の次元は inner_length 幅で固定されているが、関心のある範囲は [y_start, y_end] のみ。
#                  各行の末尾の未読スロット (inner_length - y_end) を読み飛ばして次の行の先頭に到達する。
#                  y_start 以前のスロットは補正しないため、base_address は (x_start, y_start) の構造体を指す。
@dataclass(frozen=True)
class GridPlan(TraversalPlan):
    base_address: int
    inner_length: int
    x_start: int
    x_end: int
    y_start: int
    y_end: int

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        super().validate()
        for name in ("inner_length", "x_start", "x_end", "y_start", "y_end"):
            _require_int(name, getattr(self, name))
        if self.inner_length < 0:
            raise ConfigurationError(f"inner_length must be non-negative, got {self.inner_length}.")
        if self.y_end > self.inner_length:
            raise ConfigurationError(
                f"y_end ({self.y_end}) exceeds inner_length ({self.inner_length}); "
                "the row gap would move the address backwards."
            )

    @property
    def row_gap(self) -> int:
        return self.inner_length - self.y_end

    def rows(self) -> Iterator[List[Tuple[int, ...]]]:
        for x in range(self.x_start, self.x_end + 1):
            yield [(x, y) for y in range(self.y_start, self.y_end + 1)]

    def post_row_skip(self) -> int:
        return self.row_gap

# @intent:responsibility 走査計画に従って構造体を順に読み出し、StructRecordを生成する共通ドライバ。
# @intent:pre-condition planは検証済みであること（構築時に検証されます）。
def traverse(
    plan: TraversalPlan,
    read_byte: ReadByte,
    layout: StructLayout,
    endianness: Endianness,
    index_style: IndexStyle = IndexStyle.C,
    legacy_rendering: bool = False,
) -> Iterator[StructRecord]:
    """
    各行の座標を順に訪問し、構造体を読み出します。
    行の読み出し後、plan.post_row_skip() スロット分だけアドレスを進めます。
    """
    plan.validate()
    current_address = plan.base_address

    for row in plan.rows():
        for coordinates in row:
            base_address = current_address
            current_address, lines = read_struct(
                read_byte, base_address, layout, endianness, legacy_rendering
            )
            yield StructRecord(
                coordinates=coordinates,
                base_address=base_address,
                label=plan.label(coordinates, index_style),
                lines=lines,
            )
        skip = plan.post_row_skip()
        if skip:
            log.debug("Skipping %d struct slots (%d bytes) after row", skip, skip * layout.total_size)
            current_address += layout.total_size * skip

# @intent:responsibility 走査結果をヘッダ行とフィールド行からなる出力行の列に平坦化します。
def render_lines(records: Iterator[StructRecord]) -> List[RenderedLine]:
    output: List[RenderedLine] = []
    for record in records:
        output.append(record.header())
        output.extend(line for line in record.lines if line)
    return output
