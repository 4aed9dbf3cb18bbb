"""Execution-facing entry points: the engine and its bounded worker pool."""

from descriptor_spine.execution.engine import DescriptorEngine, select_bundle
from descriptor_spine.execution.pool import SelectionPool

__all__ = ["DescriptorEngine", "SelectionPool", "select_bundle"]
