# src/array_struct_dumper/decoder/__init__.py
"""
Field / Struct Decoder Package
"""
from .field_decoder import decode_field, render_hex, parse_hex, render_hex_legacy
from .struct_reader import read_struct
