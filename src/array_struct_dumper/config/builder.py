from typing import Optional

from array_struct_dumper.common.errors import ConfigurationError
from array_struct_dumper.transport.bus import Bus, RAM, ROM
from array_struct_dumper.loader.loader import BinaryImageLoader, IntelHexLoader, SRecordLoader
from array_struct_dumper.schema.compiler import StructLayout, compile_layout
from array_struct_dumper.traversal.plan import GridPlan, LinearPlan, TraversalPlan
from array_struct_dumper.report.sink import ConsoleSink, FileSink, ReportSink
from .models import DumpConfig

# @intent:responsibility ダンプ構成（Config）に基づいて、Bus、レイアウト、走査計画、出力先を生成します。
# @intent:rationale 構成値の検証は全てここで行われ、走査開始前にConfigurationErrorとして表面化します。
class SystemBuilder:
    def build_bus(self, config: DumpConfig) -> Bus:
        bus = Bus()

        for region in config.memory_map:
            size = region.end - region.start + 1
            if size <= 0 or region.start < 0:
                raise ConfigurationError(
                    f"Invalid memory region {region.start:#x}-{region.end:#x} ({region.label or 'unnamed'})"
                )
            device_class = RAM
            if region.type == "ROM":
                device_class = ROM
            elif region.type != "RAM":
                print(f"Warning: Unknown device type '{region.type}' for range {region.start:08X}-{region.end:08X}, defaulting to RAM")
            try:
                bus.register_device(region.start, region.end, device_class(size, region.initial_value))
            except (ValueError, TypeError) as e:
                raise ConfigurationError(
                    f"Invalid memory region {region.start:#x}-{region.end:#x} ({region.label or 'unnamed'}): {e}"
                ) from e

        for image in config.images:
            try:
                if image.format == "binary":
                    BinaryImageLoader().load_binary(image.path, bus, image.address)
                elif image.format == "ihex":
                    IntelHexLoader().load_intel_hex(image.path, bus)
                elif image.format == "srec":
                    SRecordLoader().load_srecord(image.path, bus)
                else:
                    raise ConfigurationError(f"Unsupported image format: {image.format}")
            except (OSError, ValueError, IndexError) as e:
                if isinstance(e, ConfigurationError):
                    raise
                raise ConfigurationError(f"Failed to load image {image.path}: {e}") from e

        return bus

    def build_layout(self, config: DumpConfig) -> StructLayout:
        return compile_layout(config.fields)

    def build_plan(self, config: DumpConfig) -> TraversalPlan:
        if config.is_2d:
            if config.array_2d is None:
                raise ConfigurationError("2D mode requires an array_2d configuration.")
            c = config.array_2d
            return GridPlan(
                base_address=c.array_start,
                inner_length=c.inner_array_length,
                x_start=c.x_start,
                x_end=c.x_end,
                y_start=c.y_start,
                y_end=c.y_end,
            )

        if config.array_1d is None:
            raise ConfigurationError("1D mode requires an array_1d configuration.")
        c = config.array_1d
        return LinearPlan(base_address=c.array_start, index_start=c.i_start, index_end=c.i_end)

    def build_sink(self, config: DumpConfig, output_path: Optional[str] = None) -> ReportSink:
        if output_path is not None:
            return FileSink(output_path)
        if config.output.sink == "file":
            return FileSink(config.output.path)
        return ConsoleSink()
