"""
Store Module

Job storage and persistence layer.

This module provides:
- SQLite-backed storage for jobs, generated artifacts and iteration traces
- Query interface for job history and per-element optimization traces
"""

__version__ = "0.1.0"

from .repository import JobStore, StoredArtifact, StoredJob, source_hash

__all__ = ["JobStore", "StoredArtifact", "StoredJob", "source_hash"]
