"""Errors raised by the recognition pipeline."""


class RingabellError(Exception):
    """Base class for every error raised by ringabell."""


class MalformedAudioError(RingabellError):
    """The submitted bytes are not a usable 16-bit PCM WAV stream."""


class PreconditionViolation(RingabellError):
    """An internal stage received input it cannot compute on correctly."""


class ConfigError(RingabellError):
    """The configuration file or values are invalid."""
