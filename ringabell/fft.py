"""
Radix-2 fast Fourier transforms.

Two implementations of the same contract are provided:

* ``fft_recursive`` follows the textbook decimation-in-time recursion over
  ``Complex`` values. It is slow but easy to check by hand.
* ``fft`` is an iterative, bit-reversed version over numpy arrays with a
  cached twiddle table. It transforms the last axis, so a whole stack of
  spectrogram frames can be transformed in one call.

Both return the spectrum in natural order and reject lengths that are not a
power of two.
"""

import math
from functools import lru_cache
from typing import List, Sequence

import numpy as np

from .complex_math import Complex
from .exceptions import PreconditionViolation


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _check_length(n: int):
    if not is_power_of_two(n):
        raise PreconditionViolation(f"FFT length must be a power of two, got {n}")


def fft_recursive(values: Sequence[Complex]) -> List[Complex]:
    """
    Recursive radix-2 decimation-in-time FFT.

    Args:
        values: Sequence of Complex samples, length a power of two

    Returns:
        New list holding the N-point DFT
    """
    _check_length(len(values))
    return _fft_recursive(list(values))


def _fft_recursive(values: List[Complex]) -> List[Complex]:
    n = len(values)
    if n <= 1:
        return values

    even = _fft_recursive(values[0::2])
    odd = _fft_recursive(values[1::2])

    half = n // 2
    result = [Complex(0.0, 0.0)] * n
    for k in range(half):
        t = Complex.from_polar(1.0, -2.0 * math.pi * k / n).mul(odd[k])
        result[k] = even[k].add(t)
        result[k + half] = even[k].sub(t)
    return result


@lru_cache(maxsize=None)
def _twiddles(n: int) -> np.ndarray:
    table = np.exp(-2j * np.pi * np.arange(n // 2) / n)
    table.setflags(write=False)
    return table


@lru_cache(maxsize=None)
def _bit_reversal(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.intp)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    rev.setflags(write=False)
    return rev


def fft(values) -> np.ndarray:
    """
    Iterative radix-2 FFT along the last axis.

    Args:
        values: Array-like of shape (..., N), N a power of two

    Returns:
        complex128 array of the same shape
    """
    x = np.asarray(values, dtype=np.complex128)
    n = x.shape[-1] if x.ndim else 0
    _check_length(n)
    if n == 1:
        return x.copy()

    lead = x.shape[:-1]
    x = x[..., _bit_reversal(n)]
    table = _twiddles(n)

    size = 2
    while size <= n:
        half = size // 2
        w = table[:: n // size][:half]
        blocks = x.reshape(lead + (n // size, size))
        even = blocks[..., :half]
        odd = blocks[..., half:] * w
        x = np.concatenate([even + odd, even - odd], axis=-1).reshape(lead + (n,))
        size *= 2

    return x


def ifft(values) -> np.ndarray:
    """Inverse transform via conjugate -> fft -> conjugate -> 1/N."""
    x = np.asarray(values, dtype=np.complex128)
    n = x.shape[-1] if x.ndim else 0
    return np.conj(fft(np.conj(x))) / n
