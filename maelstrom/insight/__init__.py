"""
Undercurrent (insight) generation.

This module provides:
- Timeframe-based selection of recent notes
- LLM-powered synthesis of summary, questions and color palette
- Tolerant parsing of the model's JSON output
"""

from .generator import InsightGenerator, extract_json_object, parse_insight_response
from .models import (
    DEFAULT_SENTIMENT_COLORS,
    INSUFFICIENT_DATA_MESSAGE,
    InsightOutput,
    InsufficientData,
    Timeframe,
)

__all__ = [
    "InsightGenerator",
    "extract_json_object",
    "parse_insight_response",
    "DEFAULT_SENTIMENT_COLORS",
    "INSUFFICIENT_DATA_MESSAGE",
    "InsightOutput",
    "InsufficientData",
    "Timeframe",
]
