"""Minimal complex number value type used by the reference FFT."""

from __future__ import annotations

import math
from typing import NamedTuple


class Complex(NamedTuple):
    re: float
    im: float = 0.0

    @classmethod
    def from_polar(cls, r: float, theta: float) -> "Complex":
        """r * e^(i*theta)"""
        return cls(r * math.cos(theta), r * math.sin(theta))

    @classmethod
    def from_builtin(cls, z: complex) -> "Complex":
        return cls(z.real, z.imag)

    def to_builtin(self) -> complex:
        return complex(self.re, self.im)

    def add(self, other: "Complex") -> "Complex":
        return Complex(self.re + other.re, self.im + other.im)

    def sub(self, other: "Complex") -> "Complex":
        return Complex(self.re - other.re, self.im - other.im)

    def mul(self, other: "Complex") -> "Complex":
        return Complex(
            self.re * other.re - self.im * other.im,
            self.re * other.im + self.im * other.re,
        )

    def conjugate(self) -> "Complex":
        return Complex(self.re, -self.im)

    def magnitude(self) -> float:
        return math.hypot(self.re, self.im)

    # NamedTuple would otherwise concatenate / repeat on + and *
    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.sub(other)

    def __mul__(self, other):
        return self.mul(other)

    def __abs__(self):
        return self.magnitude()
