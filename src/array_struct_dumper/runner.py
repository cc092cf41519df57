# array_struct_dumper/runner.py
"""
ダンプセッション

構成からバス、レイアウト、走査計画、出力先を組み立て、
一度きりのダンプを実行します。
"""
import logging
from typing import List, Optional

from array_struct_dumper.common.types import ReadByte, RenderedLine
from array_struct_dumper.config.builder import SystemBuilder
from array_struct_dumper.config.models import DumpConfig
from array_struct_dumper.report.sink import SEPARATOR, ReportSink
from array_struct_dumper.transport.bus import bus_reader
from array_struct_dumper.traversal.plan import render_lines, traverse

log = logging.getLogger(__name__)

# @intent:responsibility 1回分のダンプ処理（構築、走査、出力）を実行します。
class DumpSession:
    """
    read_byteが指定された場合はバスを構築せず、それをホストのバイト読み出しプリミティブとして使用します。
    """
    def __init__(self, config: DumpConfig, read_byte: Optional[ReadByte] = None,
                 sink: Optional[ReportSink] = None, builder: Optional[SystemBuilder] = None):
        self._config = config
        self._read_byte = read_byte
        self._sink = sink
        self._builder = builder or SystemBuilder()

    def run(self) -> List[RenderedLine]:
        builder = self._builder

        # 走査前に全ての構成を検証する
        layout = builder.build_layout(self._config)
        plan = builder.build_plan(self._config)
        sink = self._sink or builder.build_sink(self._config)
        read_byte = self._read_byte
        if read_byte is None:
            read_byte = bus_reader(builder.build_bus(self._config))

        print(f"Detected struct of size: {layout.total_size} bytes")
        log.debug("Traversing %d structs with %s", plan.count(), type(plan).__name__)

        lines = render_lines(traverse(
            plan,
            read_byte,
            layout,
            self._config.endianness,
            self._config.index_style,
            self._config.legacy_rendering,
        ))

        print(f"Finished dumping memory\n{SEPARATOR}")
        return sink.emit(lines)
