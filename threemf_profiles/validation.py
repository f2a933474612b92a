import logging
import os
from pathlib import Path

from .archive import ArchiveError, open_package
from .models import DEFAULT_LAYOUT, PackageLayout, ValidationResult

logger = logging.getLogger(__name__)

REASON_NOT_FOUND = "File not found"
REASON_BAD_EXTENSION = "File must have {ext} extension"
REASON_NOT_ZIP = "Invalid {ext} file (not a valid ZIP archive)"
REASON_NO_CONTENT_TYPES = "Invalid {ext} file (missing {name})"
REASON_NO_MODEL = "Invalid {ext} file (missing {suffix} file)"


def validate_package(
    path: str | os.PathLike,
    layout: PackageLayout = DEFAULT_LAYOUT,
) -> ValidationResult:
    """
    Pre-flight structural check of a package, without deep parsing.

    Checks run in order and stop at the first failure: the file is readable,
    carries the expected extension, opens as a ZIP archive, contains the
    content-types manifest, and contains at least one model descriptor.
    """
    path = Path(path)
    ext = layout.extension

    if not path.is_file() or not os.access(path, os.R_OK):
        return ValidationResult.fail(REASON_NOT_FOUND)

    if not path.name.lower().endswith(ext.lower()):
        return ValidationResult.fail(REASON_BAD_EXTENSION.format(ext=ext))

    try:
        package = open_package(path)
    except ArchiveError as e:
        logger.debug("%s", e)
        return ValidationResult.fail(REASON_NOT_ZIP.format(ext=ext))

    with package:
        has_content_types = layout.content_types_name in package
        has_model = package.find_first(layout.is_model) is not None

    if not has_content_types:
        return ValidationResult.fail(
            REASON_NO_CONTENT_TYPES.format(ext=ext, name=layout.content_types_name)
        )
    if not has_model:
        return ValidationResult.fail(
            REASON_NO_MODEL.format(ext=ext, suffix=layout.model_suffix)
        )
    return ValidationResult.ok()
