from dataclasses import dataclass, field
from typing import List, Optional

from array_struct_dumper.common.types import Endianness, FieldSpec, IndexStyle

DEFAULT_OUTPUT_PATH = "arr_struct_reader_out.txt"

@dataclass
class MemoryRegion:
    start: int
    end: int
    type: str = "RAM"  # "RAM", "ROM"
    label: str = ""
    initial_value: int = 0x00

@dataclass
class ImageSource:
    path: str
    format: str = "binary"  # "binary", "ihex", "srec"
    address: int = 0x0000   # binary形式のみ使用

@dataclass
class OutputConfig:
    sink: str = "console"  # "console", "file"
    path: str = DEFAULT_OUTPUT_PATH

@dataclass
class Array1DConfig:
    array_start: int
    i_start: int
    i_end: int

@dataclass
class Array2DConfig:
    array_start: int
    inner_array_length: int
    x_start: int
    x_end: int
    y_start: int
    y_end: int

@dataclass
class DumpConfig:
    fields: List[FieldSpec] = field(default_factory=list)
    endianness: Endianness = Endianness.LITTLE
    is_2d: bool = False
    index_style: IndexStyle = IndexStyle.C
    legacy_rendering: bool = False
    output: OutputConfig = field(default_factory=OutputConfig)
    memory_map: List[MemoryRegion] = field(default_factory=list)
    images: List[ImageSource] = field(default_factory=list)
    array_1d: Optional[Array1DConfig] = None
    array_2d: Optional[Array2DConfig] = None
