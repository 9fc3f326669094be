"""Package-wide exception hierarchy."""


class MaelstromError(Exception):
    """Maelstrom base exception"""

    pass


class NoteValidationError(MaelstromError, ValueError):
    """Note content is empty or exceeds the length limit"""

    pass


class InsightGenerationError(MaelstromError):
    """Undercurrent generation failed (LLM, parsing or persistence)"""

    pass
