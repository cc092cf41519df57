# src/array_struct_dumper/__init__.py
"""
array_struct_dumper: メモリ上のC構造体配列を16進数でダンプするツール。
"""
__version__ = "0.1.0"
