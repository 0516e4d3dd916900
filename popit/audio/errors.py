"""
Pop It Bubble - Audio Errors
"""


class AudioError(Exception):
    """Base class for pop sound generation and playback errors."""


class InvalidInput(AudioError, ValueError):
    """Raised when synthesis or encoding receives an unusable argument."""


class EncodingUnavailable(AudioError):
    """Raised when a generated container cannot be stored or loaded for playback."""
