"""
threemf_profiles — Print-profile extraction for 3MF packages

Validates slicer project packages, reads their model descriptor, decodes
vendor configuration dialects (BambuStudio/OrcaSlicer, PrusaSlicer/
SuperSlicer, G-code header comments) into one canonical settings mapping,
and recovers the embedded preview image.
"""

from .models import (
    CanonicalSetting,
    DecoderStage,
    PackageLayout,
    DEFAULT_LAYOUT,
    SettingValue,
    ValidationResult,
    DecodeResult,
    ExtractionResult,
)
from .archive import ArchiveError, Package, open_package
from .validation import validate_package
from .descriptor import DescriptorInfo, parse_model_xml
from .normalize import normalize_value, coerce_setting
from .decoders import (
    BaseDecoder,
    MetadataXmlDecoder,
    GcodeCommentDecoder,
    BambuConfigDecoder,
    PrusaSlicerDecoder,
)
from .pipeline import DECODER_STAGES, ProfileExtractor, extract_profile
from .thumbnail import extract_thumbnail, extract_thumbnail_from_file, find_thumbnail_entry
from .summary import profile_summary

__all__ = [
    # Enums
    "CanonicalSetting",
    "DecoderStage",
    # Models
    "PackageLayout",
    "DEFAULT_LAYOUT",
    "SettingValue",
    "ValidationResult",
    "DecodeResult",
    "ExtractionResult",
    "DescriptorInfo",
    # Archive
    "Package",
    "open_package",
    # Extraction
    "validate_package",
    "parse_model_xml",
    "normalize_value",
    "coerce_setting",
    "DECODER_STAGES",
    "ProfileExtractor",
    "extract_profile",
    "extract_thumbnail",
    "extract_thumbnail_from_file",
    "find_thumbnail_entry",
    "profile_summary",
    # Decoders
    "BaseDecoder",
    "MetadataXmlDecoder",
    "GcodeCommentDecoder",
    "BambuConfigDecoder",
    "PrusaSlicerDecoder",
    # Exceptions
    "ArchiveError",
]
