import os
import yaml
from typing import Dict, Any, List, Optional

from array_struct_dumper.common.errors import ConfigurationError
from array_struct_dumper.common.types import Endianness, FieldSpec, IndexStyle
from array_struct_dumper.schema.compiler import field_from_pair
from .models import (
    Array1DConfig,
    Array2DConfig,
    DumpConfig,
    ImageSource,
    MemoryRegion,
    OutputConfig,
    DEFAULT_OUTPUT_PATH,
)

MODES = {"1d": False, "2d": True}
SINKS = ("console", "file")
IMAGE_FORMATS = ("binary", "ihex", "srec")

class ConfigLoader:
    def load_from_file(self, path: str) -> DumpConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        return self._parse_config(data, base_dir=os.path.dirname(os.path.abspath(path)))

    def load_from_string(self, text: str, base_dir: Optional[str] = None) -> DumpConfig:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}") from e
        return self._parse_config(data, base_dir=base_dir)

    def _parse_config(self, data: Any, base_dir: Optional[str] = None) -> DumpConfig:
        if not isinstance(data, dict):
            raise ConfigurationError("Config root must be a mapping.")

        endianness = self._parse_enum(Endianness, data.get("endianness", "little"), "endianness")
        index_style = self._parse_enum(IndexStyle, data.get("index_style", "c"), "index_style")

        mode = str(data.get("mode", "1d")).lower()
        if mode not in MODES:
            raise ConfigurationError(f"Unknown mode '{mode}', expected one of: {', '.join(MODES)}")

        # Parse Output
        output_data = self._section(data.get("output"), "output") or {}
        sink = str(output_data.get("sink", "console")).lower()
        if sink not in SINKS:
            raise ConfigurationError(f"Unknown output sink '{sink}', expected one of: {', '.join(SINKS)}")
        output = OutputConfig(
            sink=sink,
            path=self._resolve(output_data.get("path", DEFAULT_OUTPUT_PATH), base_dir),
        )

        # Parse Memory Map
        memory_map = []
        for region_data in self._entries(data.get("memory_map"), "memory_map"):
            memory_map.append(MemoryRegion(
                start=self._parse_int(region_data.get("start"), "memory_map.start"),
                end=self._parse_int(region_data.get("end"), "memory_map.end"),
                type=str(region_data.get("type", "RAM")).upper(),
                label=region_data.get("label", ""),
                initial_value=self._parse_int(region_data.get("initial_value", 0), "memory_map.initial_value"),
            ))

        # Parse Images
        images = []
        for image_data in self._entries(data.get("images"), "images"):
            if "path" not in image_data:
                raise ConfigurationError("Image entry requires a 'path'.")
            fmt = str(image_data.get("format", "binary")).lower()
            if fmt not in IMAGE_FORMATS:
                raise ConfigurationError(f"Unknown image format '{fmt}', expected one of: {', '.join(IMAGE_FORMATS)}")
            images.append(ImageSource(
                path=self._resolve(image_data["path"], base_dir),
                format=fmt,
                address=self._parse_int(image_data.get("address", 0), "images.address"),
            ))

        array_1d = None
        if data.get("array_1d") is not None:
            section = self._section(data["array_1d"], "array_1d")
            array_1d = Array1DConfig(
                array_start=self._parse_int(section.get("array_start"), "array_1d.array_start"),
                i_start=self._parse_int(section.get("i_start"), "array_1d.i_start"),
                i_end=self._parse_int(section.get("i_end"), "array_1d.i_end"),
            )

        array_2d = None
        if data.get("array_2d") is not None:
            section = self._section(data["array_2d"], "array_2d")
            array_2d = Array2DConfig(**{
                key: self._parse_int(section.get(key), f"array_2d.{key}")
                for key in ("array_start", "inner_array_length", "x_start", "x_end", "y_start", "y_end")
            })

        is_2d = MODES[mode]
        if is_2d and array_2d is None:
            raise ConfigurationError("mode is '2d' but no 'array_2d' section is defined.")
        if not is_2d and array_1d is None:
            raise ConfigurationError("mode is '1d' but no 'array_1d' section is defined.")

        return DumpConfig(
            fields=self._parse_fields(data.get("struct")),
            endianness=endianness,
            is_2d=is_2d,
            index_style=index_style,
            legacy_rendering=self._parse_bool(data.get("legacy_rendering", False), "legacy_rendering"),
            output=output,
            memory_map=memory_map,
            images=images,
            array_1d=array_1d,
            array_2d=array_2d,
        )

    def _parse_fields(self, entries: Any) -> List[FieldSpec]:
        if not isinstance(entries, list) or not entries:
            raise ConfigurationError("'struct' must be a non-empty list of fields.")

        fields = []
        for index, entry in enumerate(entries):
            # [name, size] または {name: ..., size: ...} の両形式を受け付ける
            if isinstance(entry, dict):
                name, size = entry.get("name"), entry.get("size")
            elif isinstance(entry, (list, tuple)) and len(entry) == 2:
                name, size = entry
            else:
                raise ConfigurationError(f"Invalid field definition at struct[{index}]: {entry!r}")
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Field name at struct[{index}] must be a non-empty string.")
            fields.append(field_from_pair(name, self._parse_int(size, f"struct[{index}].size")))
        return fields

    # @intent:responsibility セクションがマッピング（またはNone）であることを検証します。
    def _section(self, value: Any, key: str) -> Optional[Dict[str, Any]]:
        if value is not None and not isinstance(value, dict):
            raise ConfigurationError(f"'{key}' must be a mapping, got {value!r}")
        return value

    # @intent:responsibility マッピングのリストであることを検証し、各要素を返します。
    def _entries(self, value: Any, key: str) -> List[Dict[str, Any]]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ConfigurationError(f"'{key}' must be a list, got {value!r}")
        return [self._section(entry, f"{key}[{index}]") or {} for index, entry in enumerate(value)]

    def _parse_bool(self, value: Any, key: str) -> bool:
        if isinstance(value, bool):
            return value
        raise ConfigurationError(f"Invalid boolean for {key}: {value!r}")

    def _parse_enum(self, enum_type, value: Any, key: str):
        try:
            return enum_type(str(value).lower())
        except ValueError:
            choices = ", ".join(member.value for member in enum_type)
            raise ConfigurationError(f"Invalid {key} '{value}', expected one of: {choices}") from None

    def _resolve(self, path: str, base_dir: Optional[str]) -> str:
        if base_dir is None or os.path.isabs(path):
            return path
        return os.path.join(base_dir, path)

    def _parse_int(self, value: Any, key: str = "value") -> int:
        if isinstance(value, bool):
            raise ConfigurationError(f"Invalid integer for {key}: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith(("0x", "-0x")):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigurationError(f"Invalid integer for {key}: {value!r}")
