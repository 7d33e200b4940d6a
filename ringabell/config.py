from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

import yaml

from .exceptions import ConfigError

CONFIG_ENV_VAR = "RINGABELL_CONFIG"

# Frequency bands (index ranges into each spectrum frame)
BANDS = (
    (0, 10),      # very low
    (10, 20),     # low
    (20, 40),     # low-mid
    (40, 80),     # mid
    (80, 160),    # mid-high
    (160, 512),   # high
)

FFT_BACKENDS = ("vectorized", "recursive")


@dataclass(frozen=True)
class Config:
    """
    Signal processing and matching parameters.

    Args:
        sample_rate: Rate the spectrogram stage expects its input at (Hz)
        freq_bin_size: FFT window size, must be a power of two
        hop_size: Number of samples between frame starts
        max_freq: Amplitude cut-off numerator of the low-pass stage (Hz)
        dsp_ratio: Downsampling factor applied after the low-pass stage
        target_zone_size: How many following peaks each anchor pairs with
        min_score: Lowest vote count accepted as a match
        fft_backend: "vectorized" or "recursive"
        max_upload_bytes: Largest upload accepted by the HTTP server
        log_level: Level name used by the CLI and server entry points
    """

    sample_rate: int = 44100
    freq_bin_size: int = 1024
    hop_size: int = 512
    max_freq: float = 5000.0
    dsp_ratio: int = 4
    target_zone_size: int = 3
    min_score: int = 10
    fft_backend: str = "vectorized"
    max_upload_bytes: int = 50 * 1024 * 1024  # 50 MB
    log_level: str = "INFO"

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ConfigError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.hop_size <= 0 or self.hop_size >= self.freq_bin_size:
            raise ConfigError(
                f"hop_size must be in (0, freq_bin_size), got {self.hop_size}"
            )
        if self.dsp_ratio <= 0 or self.dsp_ratio > self.sample_rate:
            raise ConfigError(f"dsp_ratio out of range: {self.dsp_ratio}")
        if self.target_zone_size < 1:
            raise ConfigError("target_zone_size must be at least 1")
        if self.min_score < 0:
            raise ConfigError("min_score must not be negative")
        if self.fft_backend not in FFT_BACKENDS:
            raise ConfigError(
                f"Unknown fft_backend: {self.fft_backend}. Choose from {list(FFT_BACKENDS)}"
            )

    @property
    def target_sample_rate(self) -> int:
        return self.sample_rate // self.dsp_ratio


def load_config(path: Optional[Union[str, Path]] = None, **overrides) -> Config:
    """
    Build a Config from defaults, an optional YAML file and keyword overrides.

    When ``path`` is None the file named by $RINGABELL_CONFIG is used, if set.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)

    data: dict = {}
    if path:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"Config file not found: {p}")
        try:
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {p}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {p} must contain a mapping")

    data.update(overrides)

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {unknown}")

    return replace(Config(), **data)
