"""
Jobs Module

Batch orchestration and the ambient tooling around it.

This module provides:
- YAML job configuration
- The batch orchestrator and the filesystem artifact sink
- Per-element metrics, failure classification and Markdown reports
- A seeded demo analysis and the ``uiforge`` CLI
"""

__version__ = "0.1.0"
