"""
Combinatorial hashing of peak pairs.

Each anchor peak is paired with the next few peaks (its target zone). A pair
packs into a 64-bit hash::

    [9 bits anchor freq][9 bits target freq][14 bits delta ms][32 bits anchor time ms]

The upper 32 bits are the pair's *address*.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .exceptions import PreconditionViolation
from .peaks import Peak

logger = logging.getLogger(__name__)

TARGET_ZONE_SIZE = 3

ANCHOR_FREQ_SHIFT = 23
TARGET_FREQ_SHIFT = 14
ADDRESS_SHIFT = 32

FREQ_BITS = 9
DELTA_BITS = 14
TIME_BITS = 32


def _check_width(name: str, value: int, bits: int):
    if not 0 <= value < (1 << bits):
        raise PreconditionViolation(
            f"{name}={value} does not fit in {bits} bits"
        )


@dataclass(frozen=True)
class Fingerprint:
    """A validated anchor/target pair; ``hash`` is its 64-bit encoding."""

    anchor_freq: int
    target_freq: int
    delta_ms: int
    anchor_time_ms: int

    def __post_init__(self):
        _check_width("anchor_freq", self.anchor_freq, FREQ_BITS)
        _check_width("target_freq", self.target_freq, FREQ_BITS)
        _check_width("delta_ms", self.delta_ms, DELTA_BITS)
        _check_width("anchor_time_ms", self.anchor_time_ms, TIME_BITS)

    @property
    def address(self) -> int:
        return (
            (self.anchor_freq << ANCHOR_FREQ_SHIFT)
            | (self.target_freq << TARGET_FREQ_SHIFT)
            | self.delta_ms
        )

    @property
    def hash(self) -> int:
        return (self.address << ADDRESS_SHIFT) | self.anchor_time_ms

    @classmethod
    def from_hash(cls, value: int) -> "Fingerprint":
        _check_width("hash", value, 64)
        address = value >> ADDRESS_SHIFT
        return cls(
            anchor_freq=address >> ANCHOR_FREQ_SHIFT,
            target_freq=(address >> TARGET_FREQ_SHIFT) & ((1 << FREQ_BITS) - 1),
            delta_ms=address & ((1 << DELTA_BITS) - 1),
            anchor_time_ms=value & ((1 << TIME_BITS) - 1),
        )

    @classmethod
    def from_peaks(cls, anchor: Peak, target: Peak) -> "Fingerprint":
        delta = target.time_ms - anchor.time_ms
        if delta < 0:
            raise PreconditionViolation(
                f"Target peak at {target.time_ms} ms precedes anchor at {anchor.time_ms} ms"
            )
        return cls(
            anchor_freq=int(anchor.freq_bin),
            target_freq=int(target.freq_bin),
            delta_ms=int(delta),
            anchor_time_ms=int(anchor.time_ms),
        )


def create_address(anchor: Peak, target: Peak) -> int:
    """32-bit address of an anchor/target pair."""
    return Fingerprint.from_peaks(anchor, target).address


def iter_pairs(n_peaks: int, target_zone_size: int = TARGET_ZONE_SIZE) -> Iterable:
    """Index pairs (i, j) with 0 < j - i <= target_zone_size."""
    for i in range(n_peaks):
        for j in range(i + 1, min(i + target_zone_size, n_peaks - 1) + 1):
            yield i, j


def create_fingerprints(
    peaks: Sequence[Peak],
    target_zone_size: int = TARGET_ZONE_SIZE,
) -> List[int]:
    """
    Generate fingerprint hashes from time-ordered peaks.

    Args:
        peaks: Peaks as produced by extract_peaks (times in ms)
        target_zone_size: Number of following peaks each anchor pairs with

    Returns:
        Hashes in generation order, duplicates kept

    Raises:
        PreconditionViolation: if a target precedes its anchor or a field overflows
    """
    hashes = [
        Fingerprint.from_peaks(peaks[i], peaks[j]).hash
        for i, j in iter_pairs(len(peaks), target_zone_size)
    ]
    logger.debug("Generated %d fingerprints from %d peaks", len(hashes), len(peaks))
    return hashes
