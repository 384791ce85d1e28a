"""
Printer Target Selector
=======================

Upload path: resolved label format -> printer target.
Queue path: object key -> format hint -> printer target. The queue path
trusts the key's prefix instead of inspecting pixel data.

Both return an empty target when nothing matches; callers check
``target.is_empty`` before printing.
"""

import posixpath
from typing import Tuple, Union

from .catalog import FormatCatalog
from .models import LabelFormat, PrinterTarget

DEFAULT_SEPARATOR = '-'


def select_target(catalog: FormatCatalog, label: Union[LabelFormat, str]) -> PrinterTarget:
    """Printer target for a label format."""
    return catalog.target_for(str(label)) or PrinterTarget.empty()


def format_hint(key: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """
    Label format encoded in a queue key.

    ``'62-abc.png'`` -> ``'62'``; ``'pending/102x152-order1.png'`` -> ``'102x152'``.
    A key without the separator yields the whole final path component.
    """
    name = posixpath.basename(key)
    return name.split(separator, 1)[0]


def select_target_for_key(catalog: FormatCatalog, key: str,
                          separator: str = DEFAULT_SEPARATOR) -> Tuple[str, PrinterTarget]:
    """(format hint, printer target) for a queue key."""
    label = format_hint(key, separator)
    return label, select_target(catalog, label)
