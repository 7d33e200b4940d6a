"""
ringabell - audio content recognition by band-peak fingerprinting.

Register known recordings and identify query clips against them:

    from ringabell import Recognizer

    recognizer = Recognizer()
    recognizer.register("song.wav", open("song.wav", "rb").read())
    recognizer.search(open("clip.wav", "rb").read())
"""

from .audio_fingerprinter import AudioFingerprinter, Recognizer
from .config import Config, load_config
from .exceptions import (
    ConfigError,
    MalformedAudioError,
    PreconditionViolation,
    RingabellError,
)
from .index import FingerprintIndex, SearchResult

__version__ = "0.1.0"

__all__ = [
    "AudioFingerprinter",
    "Recognizer",
    "Config",
    "load_config",
    "FingerprintIndex",
    "SearchResult",
    "RingabellError",
    "MalformedAudioError",
    "PreconditionViolation",
    "ConfigError",
]
