"""Concurrent base/target extraction."""

from apidiff.pipeline.orchestrator import BASE, TARGET, DocumentPair, Orchestrator

__all__ = [
    "BASE",
    "TARGET",
    "DocumentPair",
    "Orchestrator",
]
