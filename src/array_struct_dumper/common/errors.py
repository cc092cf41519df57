"""
ダンパー全体で使用される例外クラスを定義するモジュール。
"""
from typing import Optional


class DumperError(Exception):
    """
    array_struct_dumper が送出する全ての例外の基底クラス。
    """


# @intent:responsibility スキーマ、走査ジオメトリ、設定ファイルの不正を表します。
# @intent:rationale 走査開始前に送出されるため、部分的な出力は発生しません。
class ConfigurationError(DumperError, ValueError):
    pass


# @intent:responsibility ホストのバイト読み出しプリミティブが要求に応えられなかったことを表します。
class HostReadError(DumperError, IndexError):
    """
    マップされていない（無効な）アドレスの読み出しに失敗した場合に送出されます。
    リトライは行いません。
    """
    def __init__(self, address: int, message: Optional[str] = None):
        self.address = address
        super().__init__(message or f"Cannot read memory at address {address:#010x}.")


# @intent:responsibility 出力ファイルを開けない、または書き込めないことを表します。
class SinkError(DumperError, OSError):
    pass
