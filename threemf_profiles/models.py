from __future__ import annotations

import json
from enum import Enum
from typing import Union

from pydantic import BaseModel, Field

SettingValue = Union[bool, int, float, str]


class CanonicalSetting(str, Enum):
    LAYER_HEIGHT = "layer_height"
    FIRST_LAYER_HEIGHT = "first_layer_height"
    INFILL_PERCENTAGE = "infill_percentage"
    SUPPORTS_REQUIRED = "supports_required"
    NOZZLE_TEMP = "nozzle_temp"
    BED_TEMP = "bed_temp"
    PRINT_SPEED = "print_speed"
    TRAVEL_SPEED = "travel_speed"


class DecoderStage(str, Enum):
    METADATA_XML = "metadata_xml"
    GCODE_COMMENTS = "gcode_comments"
    BAMBU_CONFIG = "bambu_config"
    PRUSASLICER_CONFIG = "prusaslicer_config"


class PackageLayout(BaseModel):
    """Fixed entry names and patterns of a slicer 3MF package."""

    extension: str = ".3mf"
    content_types_name: str = "[Content_Types].xml"
    model_suffix: str = ".model"
    metadata_dir: str = "Metadata/"
    gcode_prefix: str = "plate_"  # inside metadata_dir
    gcode_suffix: str = ".gcode"
    bambu_config_name: str = "Metadata/model_settings.config"
    prusaslicer_config_names: tuple[str, ...] = (
        "Metadata/Slic3r_PE.config",
        "Metadata/PrusaSlicer.config",
    )
    plate_thumbnail_pattern: str = r"Metadata/plate_\d+\.png$"
    thumbnail_keyword: str = "thumbnail"
    thumbnail_extensions: tuple[str, ...] = (".png", ".jpg", ".jpeg")

    def is_model(self, name: str) -> bool:
        return name.lower().endswith(self.model_suffix)

    def is_metadata_xml(self, name: str) -> bool:
        return name.startswith(self.metadata_dir) and name.lower().endswith(".xml")

    def is_plate_gcode(self, name: str) -> bool:
        if not name.startswith(self.metadata_dir):
            return False
        basename = name[len(self.metadata_dir):]
        return basename.startswith(self.gcode_prefix) and name.endswith(self.gcode_suffix)


DEFAULT_LAYOUT = PackageLayout()


class ValidationResult(BaseModel):
    """Outcome of the structural pre-flight check."""

    valid: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, reason: str) -> ValidationResult:
        return cls(valid=False, reason=reason)


class DecodeResult(BaseModel):
    """
    What one decoder contributed.

    A failed decode is still a DecodeResult: empty mappings plus the
    reason in ``error``. Callers never see the underlying exception.
    """

    stage: DecoderStage
    settings: dict[str, SettingValue] = Field(default_factory=dict)
    metadata: dict[str, str] = Field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def empty(cls, stage: DecoderStage, reason: str | None = None) -> DecodeResult:
        return cls(stage=stage, error=reason)


class ExtractionResult(BaseModel):
    """
    Everything recovered from one package.

    ``error`` set together with populated fields means a degraded extraction;
    ``error`` set with everything empty means the package never opened.
    """

    settings: dict[str, SettingValue] = Field(default_factory=dict)
    metadata: dict[str, str] = Field(default_factory=dict)
    has_thumbnail: bool = False
    thumbnail_entry_name: str | None = None
    model_count: int = Field(default=0, ge=0)
    error: str | None = None

    def settings_json(self) -> str:
        """Serialized settings blob as stored alongside a model record."""
        return json.dumps(self.settings, ensure_ascii=False)

    def summary(self) -> dict[str, SettingValue]:
        from .summary import profile_summary

        return profile_summary(self.settings)
