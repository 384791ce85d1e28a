"""
Label Models
============

Pixel dimensions of a label image and the named physical label size
they classify to.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LabelDimensions:
    """Image size in pixels; only ever used as a catalog key."""

    width: int
    height: int

    @classmethod
    def parse(cls, text: str) -> 'LabelDimensions':
        """Parse ``'696x1109'``."""
        width, sep, height = text.lower().partition('x')
        if not sep:
            raise ValueError(f"Invalid dimensions '{text}', expected WIDTHxHEIGHT")
        return cls(int(width), int(height))

    def as_tuple(self) -> tuple:
        return (self.width, self.height)

    def __str__(self) -> str:
        return f'{self.width}x{self.height}'


@dataclass(frozen=True)
class LabelFormat:
    """A physical label size known to the driver, e.g. '62x100'."""

    name: str
    description: str = ""
    dimensions: Optional[LabelDimensions] = None

    def __str__(self) -> str:
        return self.name
