"""
Format Catalog
==============

Static lookup tables: pixel dimensions -> label format, and label
format -> printer target. Built once at startup and read-only after.

Dimensions must match exactly. There is no tolerance and no aspect-ratio
fallback, so a mis-sized image is rejected rather than mis-printed.
"""

import json
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from . import config
from .errors import CatalogError
from .models import LabelDimensions, LabelFormat, PrinterTarget


class FormatCatalog:
    """Immutable dimensions/format/target tables."""

    def __init__(self, dimensions: Mapping, targets: Mapping,
                 descriptions: Optional[Mapping] = None):
        dims: Dict[LabelDimensions, str] = {}
        for key, name in dimensions.items():
            if not isinstance(key, LabelDimensions):
                key = LabelDimensions(*key)
            dims[key] = name

        tgts: Dict[str, PrinterTarget] = {}
        for name, target in targets.items():
            if isinstance(target, Mapping):
                target = PrinterTarget.from_dict(target)
            if target.is_empty:
                raise CatalogError(f"Label '{name}' has an incomplete printer target")
            tgts[name] = target

        missing = sorted({name for name in dims.values() if name not in tgts})
        if missing:
            raise CatalogError(f"No printer target for label(s): {', '.join(missing)}")

        self._dimensions = MappingProxyType(dims)
        self._targets = MappingProxyType(tgts)
        self._descriptions = MappingProxyType(dict(descriptions or {}))
        self._by_name = MappingProxyType({name: key for key, name in dims.items()})

    # =========================================================================
    # Lookups
    # =========================================================================

    def format_for(self, dimensions: LabelDimensions) -> Optional[LabelFormat]:
        """Label format for an exact pixel size, or None."""
        name = self._dimensions.get(dimensions)
        if name is None:
            return None
        return self.get_format(name)

    def target_for(self, label: str) -> Optional[PrinterTarget]:
        """Printer target for a label format name, or None."""
        return self._targets.get(str(label))

    def get_format(self, name: str) -> Optional[LabelFormat]:
        if name not in self._targets:
            return None
        return LabelFormat(
            name=name,
            description=self._descriptions.get(name, ''),
            dimensions=self._by_name.get(name),
        )

    def dimensions_for(self, name: str) -> Optional[LabelDimensions]:
        return self._by_name.get(name)

    def formats(self) -> List[LabelFormat]:
        return [self.get_format(name) for name in sorted(self._targets)]

    def __contains__(self, name) -> bool:
        return str(name) in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    def to_dict(self) -> Dict[str, dict]:
        """Catalog contents for the API."""
        result = {}
        for fmt in self.formats():
            result[fmt.name] = {
                'description': fmt.description,
                'dimensions': str(fmt.dimensions) if fmt.dimensions else None,
                'target': self._targets[fmt.name].to_dict(),
            }
        return result

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_file(cls, path: str) -> 'FormatCatalog':
        """
        Load tables from JSON.

        Format:
            {"dimensions": {"696x1109": "62x100"},
             "targets": {"62x100": {"model": "QL-500", "port": "usb://..."}},
             "descriptions": {"62x100": "62mm x 100mm die-cut"}}
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise CatalogError(f"Cannot read label catalog {path}: {e}") from e

        try:
            dimensions = {
                LabelDimensions.parse(key): name
                for key, name in data.get('dimensions', {}).items()
            }
        except ValueError as e:
            raise CatalogError(str(e)) from e

        return cls(dimensions, data.get('targets', {}), data.get('descriptions'))

    @classmethod
    def from_config(cls, catalog_file: Optional[str] = None) -> 'FormatCatalog':
        """Catalog from a JSON file when given, else from the tables in config."""
        if catalog_file:
            return cls.from_file(catalog_file)
        return cls(config.LABEL_DIMENSIONS, config.LABEL_TARGETS, config.LABEL_DESCRIPTIONS)


def default_catalog() -> FormatCatalog:
    """Catalog as configured for this process."""
    return FormatCatalog.from_config(config.LABEL_CATALOG_FILE)
