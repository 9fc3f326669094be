"""
Maelstrom: note capture and undercurrent synthesis backend.

This package provides:
- Offline-tolerant note submission with eventual synchronization
- Citation-aware rendering of LLM-generated summaries
- LLM-powered undercurrent (insight) generation over recent notes
"""

__version__ = "0.1.0"
