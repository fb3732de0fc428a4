"""Reporting adapters implementing ReportingPort."""

from featurelink.adapters.reporting.in_memory import InMemoryReporting, RecordedItem

__all__ = ["InMemoryReporting", "RecordedItem"]
