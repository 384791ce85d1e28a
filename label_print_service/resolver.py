"""
Format Resolver
===============

Reads an uploaded image's pixel size and classifies it against the
catalog. Sizes are taken literally: no resizing, rotation or DPI
inference.
"""

from typing import Iterable, Tuple

from PIL import Image, UnidentifiedImageError

from .catalog import FormatCatalog
from .errors import ImageDecodeError, LocalStorageError, UnknownFormatError
from .models import LabelDimensions, LabelFormat

DEFAULT_ACCEPTED_FORMATS = ('PNG',)


def read_dimensions(path: str, accepted_formats: Iterable[str] = DEFAULT_ACCEPTED_FORMATS) -> LabelDimensions:
    """
    Decode the image header at ``path`` and return its size.

    Args:
        path: Local image file
        accepted_formats: Pillow format names that may be printed

    Raises:
        LocalStorageError: File missing or unreadable
        ImageDecodeError: Content is not an image, or not an accepted format
    """
    accepted = {fmt.upper() for fmt in accepted_formats}

    try:
        with Image.open(path) as img:
            image_format = (img.format or '').upper()
            width, height = img.size
    except UnidentifiedImageError as e:
        raise ImageDecodeError('Uploaded file is not a decodable image') from e
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(f'Image header declares an oversized image: {e}') from e
    except OSError as e:
        raise LocalStorageError(f'Cannot read image {path}: {e}') from e

    if image_format not in accepted:
        raise ImageDecodeError(
            f"Unsupported image format {image_format or 'unknown'}; "
            f"accepted: {', '.join(sorted(accepted))}"
        )

    return LabelDimensions(width, height)


def resolve_format(path: str, catalog: FormatCatalog,
                   accepted_formats: Iterable[str] = DEFAULT_ACCEPTED_FORMATS) -> Tuple[LabelDimensions, LabelFormat]:
    """Dimensions and label format of the image at ``path``."""
    dimensions = read_dimensions(path, accepted_formats)
    label = catalog.format_for(dimensions)
    if label is None:
        raise UnknownFormatError(
            f'No label format for image size {dimensions}',
            {'dimensions': str(dimensions)},
        )
    return dimensions, label
