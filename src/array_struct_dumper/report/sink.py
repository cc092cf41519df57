# array_struct_dumper/report/sink.py
"""
Report Sink

ダンプ結果の行を受け取り、コンソールへ表示するかファイルへ保存します。
空行は出力から除外されます。
"""
import sys
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, TextIO

from array_struct_dumper.common.errors import SinkError
from array_struct_dumper.common.types import RenderedLine

SEPARATOR = "======="

# @intent:responsibility 出力先の抽象インターフェースを定義します。
class ReportSink(ABC):
    @abstractmethod
    def emit(self, lines: Iterable[RenderedLine]) -> List[RenderedLine]:
        """
        空でない行を出力し、実際に出力した行のリストを返します。
        """
        pass

    @staticmethod
    def _non_empty(lines: Iterable[RenderedLine]) -> List[RenderedLine]:
        return [line for line in lines if line]

class ConsoleSink(ReportSink):
    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def emit(self, lines: Iterable[RenderedLine]) -> List[RenderedLine]:
        # streamは呼び出し時に解決する（capsys等での差し替えに追従するため）
        stream = self._stream or sys.stdout
        emitted = self._non_empty(lines)
        for line in emitted:
            print(line, file=stream)
        print(SEPARATOR, file=stream)
        return emitted

# @intent:responsibility 行をファイルに書き込みます。
# @intent:post-condition 書き込み後はflushしてファイルを閉じます。開けない場合はSinkErrorを送出します。
class FileSink(ReportSink):
    def __init__(self, path: str):
        self.path = path

    def emit(self, lines: Iterable[RenderedLine]) -> List[RenderedLine]:
        emitted = self._non_empty(lines)
        try:
            with open(self.path, 'w') as f:
                for line in emitted:
                    f.write(line + "\n")
                f.flush()
        except OSError as e:
            raise SinkError(f"Cannot write output file {self.path}: {e}") from e
        print(f"Wrote to file: {self.path}")
        return emitted
