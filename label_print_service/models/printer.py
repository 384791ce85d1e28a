"""
Printer Target Model
====================

The device identity and connection address the print driver needs.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass(frozen=True)
class PrinterTarget:
    """Printer model name and device port, e.g. ('QL-500', 'usb://0x04f9:0x2015')."""

    model: str = ""
    port: str = ""

    @classmethod
    def empty(cls) -> 'PrinterTarget':
        """Target returned when a lookup finds nothing."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.model or not self.port

    @property
    def key(self) -> tuple:
        """Identity used for per-device locking."""
        return (self.model, self.port)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PrinterTarget':
        return cls(model=data.get('model', ''), port=data.get('port', ''))

    def __str__(self) -> str:
        return f'{self.model}@{self.port}' if not self.is_empty else '<no printer>'
