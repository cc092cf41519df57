# src/array_struct_dumper/cli.py
"""
コマンドラインのエントリポイント。
YAML構成ファイルを読み込み、ダンプセッションを実行します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from array_struct_dumper.common.errors import DumperError
from array_struct_dumper.config.builder import SystemBuilder
from array_struct_dumper.config.loader import ConfigLoader
from array_struct_dumper.runner import DumpSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="array-struct-dumper",
        description="Dump a 1D or 2D array of C structs from a memory image as hex fields.",
    )
    parser.add_argument("config", help="YAML dump configuration")
    parser.add_argument("-o", "--output", help="write the dump to this file instead of the configured sink")
    parser.add_argument("--show-layout", action="store_true", help="print the compiled struct layout and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


# @intent:responsibility CLIを実行し、終了ステータスを返します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConfigLoader().load_from_file(args.config)
        builder = SystemBuilder()
        if args.show_layout:
            for line in builder.build_layout(config).describe():
                print(line)
            return 0
        sink = builder.build_sink(config, output_path=args.output)
        DumpSession(config, sink=sink, builder=builder).run()
    except DumperError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
