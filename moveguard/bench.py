"""Timing and memory metrics collected while analysing Sui Move packages."""

from __future__ import annotations

import time
import tracemalloc
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Optional

try:
    import resource
except ImportError:  # pragma: no cover - not available on every platform
    resource = None  # type: ignore[assignment]


@dataclass
class ModuleAnalysisMetrics:
    """Counts and timing for module-level analysis."""

    total_modules: int = 0
    total_functions: int = 0
    total_structs: int = 0
    analysis_time: timedelta = field(default_factory=timedelta)
    avg_time_per_module: timedelta = field(default_factory=timedelta)


@dataclass
class ObjectAnalysisMetrics:
    """Counts and timing for object analysis."""

    total_objects: int = 0
    shared_objects: int = 0
    transfer_checks: int = 0
    guard_validations: int = 0
    analysis_time: timedelta = field(default_factory=timedelta)


@dataclass
class CapabilityAnalysisMetrics:
    """Counts and timing for capability analysis."""

    total_capabilities: int = 0
    capability_checks: int = 0
    permission_validations: int = 0
    analysis_time: timedelta = field(default_factory=timedelta)


@dataclass
class MemoryStats:
    """Summary of labelled memory samples, in bytes."""

    peak_usage: int = 0
    average_usage: int = 0
    samples: list[tuple[str, int]] = field(default_factory=list)


@dataclass
class SuiAnalysisBenchmark:
    """The finished set of benchmark results."""

    module_analysis: ModuleAnalysisMetrics
    object_analysis: ObjectAnalysisMetrics
    capability_analysis: CapabilityAnalysisMetrics
    memory_stats: MemoryStats


def current_memory_usage() -> int:
    """Memory used by this process in bytes, as well as the platform can tell."""
    if resource is not None:
        peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        # Linux reports kilobytes, macOS bytes.
        return peak if peak > 1 << 32 else peak * 1024
    if tracemalloc.is_tracing():
        return tracemalloc.get_traced_memory()[0]
    return 0


def format_duration(duration: timedelta) -> str:
    """Render a duration compactly, e.g. ``100ms``, ``1.5s`` or ``0ns``."""
    total_ns = (
        (duration.days * 86_400 + duration.seconds) * 1_000_000_000
        + duration.microseconds * 1_000
    )
    for unit_ns, digits, suffix in (
        (1_000_000_000, 9, "s"),
        (1_000_000, 6, "ms"),
        (1_000, 3, "µs"),
    ):
        if total_ns >= unit_ns:
            whole, fraction = divmod(total_ns, unit_ns)
            fraction_text = str(fraction).zfill(digits).rstrip("0")
            return f"{whole}.{fraction_text}{suffix}" if fraction_text else f"{whole}{suffix}"
    return f"{total_ns}ns"


class SuiBenchmarkCollector:
    """Accumulates analysis metrics and memory samples."""

    def __init__(self, memory_probe: Optional[Callable[[], int]] = None) -> None:
        self._start = time.perf_counter()
        self._memory_probe = memory_probe or current_memory_usage
        self._module_metrics = ModuleAnalysisMetrics()
        self._object_metrics = ObjectAnalysisMetrics()
        self._capability_metrics = CapabilityAnalysisMetrics()
        self._memory_samples: list[tuple[str, int]] = []

    @property
    def elapsed(self) -> timedelta:
        """Time since the collector was created."""
        return timedelta(seconds=time.perf_counter() - self._start)

    def record_module_analysis(
        self,
        module_count: int,
        function_count: int,
        struct_count: int,
        duration: timedelta,
    ) -> None:
        metrics = self._module_metrics
        metrics.total_modules += module_count
        metrics.total_functions += function_count
        metrics.total_structs += struct_count
        metrics.analysis_time += duration
        if module_count > 0:
            metrics.avg_time_per_module = metrics.analysis_time / module_count

    def record_object_analysis(self, metrics: ObjectAnalysisMetrics) -> None:
        own = self._object_metrics
        own.total_objects += metrics.total_objects
        own.shared_objects += metrics.shared_objects
        own.transfer_checks += metrics.transfer_checks
        own.guard_validations += metrics.guard_validations
        own.analysis_time += metrics.analysis_time

    def record_capability_analysis(self, metrics: CapabilityAnalysisMetrics) -> None:
        own = self._capability_metrics
        own.total_capabilities += metrics.total_capabilities
        own.capability_checks += metrics.capability_checks
        own.permission_validations += metrics.permission_validations
        own.analysis_time += metrics.analysis_time

    def take_memory_sample(self, label: str) -> None:
        self._memory_samples.append((label, self._memory_probe()))

    def finish(self) -> SuiAnalysisBenchmark:
        usages = [usage for _, usage in self._memory_samples]
        memory_stats = MemoryStats(
            peak_usage=max(usages, default=0),
            average_usage=sum(usages) // len(usages) if usages else 0,
            samples=list(self._memory_samples),
        )
        return SuiAnalysisBenchmark(
            module_analysis=self._module_metrics,
            object_analysis=self._object_metrics,
            capability_analysis=self._capability_metrics,
            memory_stats=memory_stats,
        )

    def report(self) -> str:
        modules = self._module_metrics
        objects = self._object_metrics
        caps = self._capability_metrics
        lines = [
            "Sui Move Analysis Performance Report",
            "===================================",
            "",
            "Module Analysis:",
            f"  Total Modules: {modules.total_modules}",
            f"  Total Functions: {modules.total_functions}",
            f"  Total Structs: {modules.total_structs}",
            f"  Analysis Time: {format_duration(modules.analysis_time)}",
            f"  Avg Time/Module: {format_duration(modules.avg_time_per_module)}",
            "",
            "Object Analysis:",
            f"  Total Objects: {objects.total_objects}",
            f"  Shared Objects: {objects.shared_objects}",
            f"  Transfer Checks: {objects.transfer_checks}",
            f"  Guard Validations: {objects.guard_validations}",
            f"  Analysis Time: {format_duration(objects.analysis_time)}",
            "",
            "Capability Analysis:",
            f"  Total Capabilities: {caps.total_capabilities}",
            f"  Capability Checks: {caps.capability_checks}",
            f"  Permission Validations: {caps.permission_validations}",
            f"  Analysis Time: {format_duration(caps.analysis_time)}",
            "",
            "Memory Usage:",
        ]
        lines.extend(f"  {label}: {usage} bytes" for label, usage in self._memory_samples)
        return "\n".join(lines) + "\n"