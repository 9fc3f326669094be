"""Route registration helpers."""

from .notes import register_note_routes
from .undercurrents import register_undercurrent_routes

__all__ = [
    "register_note_routes",
    "register_undercurrent_routes",
]
