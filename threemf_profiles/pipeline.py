"""
Extraction orchestrator: open → descriptor → decoder stages → thumbnail.

One call owns one open package and closes it on every exit path. Each
decoder stage contributes a partial mapping; partial mappings are merged in
the order of DECODER_STAGES, later stages overwriting earlier keys.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .archive import ArchiveError, Package, open_package
from .decoders import (
    BambuConfigDecoder,
    BaseDecoder,
    GcodeCommentDecoder,
    MetadataXmlDecoder,
    PrusaSlicerDecoder,
)
from .descriptor import parse_model_xml
from .models import (
    DEFAULT_LAYOUT,
    DecoderStage,
    ExtractionResult,
    PackageLayout,
    ValidationResult,
)
from .thumbnail import extract_thumbnail_from_file, find_thumbnail_entry
from .validation import validate_package

logger = logging.getLogger(__name__)

ERROR_NOT_FOUND = "File not found"
ERROR_OPEN_FAILED = "Failed to open .3mf file"
ERROR_PARSE_PREFIX = "Error parsing .3mf: "

# Merge precedence, lowest first. A later stage overwrites keys set by an
# earlier one.
DECODER_STAGES: tuple[DecoderStage, ...] = (
    DecoderStage.METADATA_XML,
    DecoderStage.GCODE_COMMENTS,
    DecoderStage.BAMBU_CONFIG,
    DecoderStage.PRUSASLICER_CONFIG,
)


@dataclass(frozen=True)
class StagePlan:
    """Which entries a decoder runs over.

    With ``first_only`` the candidates are alternates: the first one that is
    present and non-empty is decoded and the rest are not read.
    """

    decoder: BaseDecoder
    candidates: Callable[[Package, PackageLayout], list[str]]
    first_only: bool = False


def _metadata_xml_entries(package: Package, layout: PackageLayout) -> list[str]:
    return list(package.iter_matching(layout.is_metadata_xml))


def _gcode_entries(package: Package, layout: PackageLayout) -> list[str]:
    return list(package.iter_matching(layout.is_plate_gcode))


def _bambu_entries(package: Package, layout: PackageLayout) -> list[str]:
    return [layout.bambu_config_name]


def _prusaslicer_entries(package: Package, layout: PackageLayout) -> list[str]:
    return list(layout.prusaslicer_config_names)


STAGE_PLANS: dict[DecoderStage, StagePlan] = {
    DecoderStage.METADATA_XML: StagePlan(MetadataXmlDecoder(), _metadata_xml_entries),
    DecoderStage.GCODE_COMMENTS: StagePlan(GcodeCommentDecoder(), _gcode_entries),
    DecoderStage.BAMBU_CONFIG: StagePlan(BambuConfigDecoder(), _bambu_entries),
    DecoderStage.PRUSASLICER_CONFIG: StagePlan(
        PrusaSlicerDecoder(), _prusaslicer_entries, first_only=True
    ),
}


class ProfileExtractor:
    """
    Print-profile extraction for 3MF packages.

    Usage:
        extractor = ProfileExtractor()

        check = extractor.validate("benchy.3mf")
        if check.valid:
            result = extractor.extract("benchy.3mf")
            print(result.settings, result.summary())
            extractor.extract_thumbnail("benchy.3mf", "benchy.png")

    Holds no per-call state; one instance may serve any number of packages.
    """

    def __init__(self, layout: PackageLayout | None = None):
        self.layout = layout or DEFAULT_LAYOUT

    def validate(self, path: str | os.PathLike) -> ValidationResult:
        return validate_package(path, self.layout)

    def extract_thumbnail(self, path: str | os.PathLike, output_path: str | os.PathLike) -> bool:
        return extract_thumbnail_from_file(path, output_path, self.layout)

    def extract(self, path: str | os.PathLike) -> ExtractionResult:
        """
        Extract settings, metadata and preview information from a package.

        Failure to open the package is fatal and returns a result holding
        only ``error``. Everything after that is best effort: a decoder that
        cannot parse its payload contributes nothing, and an entry that
        cannot be read is reported in ``error`` while the remaining stages
        still run.
        """
        path = Path(path)
        if not path.is_file():
            return ExtractionResult(error=ERROR_NOT_FOUND)

        try:
            package = open_package(path)
        except ArchiveError as e:
            logger.warning("%s", e)
            return ExtractionResult(error=ERROR_OPEN_FAILED)

        with package:
            return self._extract_from(package)

    def _extract_from(self, package: Package) -> ExtractionResult:
        result = ExtractionResult()
        problems: list[str] = []

        try:
            self._read_descriptor(package, result)
        except ArchiveError as e:
            problems.append(str(e))

        for stage in DECODER_STAGES:
            try:
                self._run_stage(stage, package, result)
            except ArchiveError as e:
                logger.warning("%s stage skipped for %s: %s", stage.value, package.path, e)
                problems.append(str(e))

        thumbnail = find_thumbnail_entry(package.entries(), self.layout)
        result.has_thumbnail = thumbnail is not None
        result.thumbnail_entry_name = thumbnail

        if problems:
            result.error = ERROR_PARSE_PREFIX + "; ".join(problems)
        return result

    def _read_descriptor(self, package: Package, result: ExtractionResult) -> None:
        name = package.find_first(self.layout.is_model)
        if name is None:
            logger.debug("No model descriptor in %s", package.path)
            return
        data = package.read(name)
        if not data:
            return
        info = parse_model_xml(data)
        result.model_count = info.model_count
        result.metadata.update(info.metadata)

    def _run_stage(self, stage: DecoderStage, package: Package, result: ExtractionResult) -> None:
        plan = STAGE_PLANS[stage]
        for name in plan.candidates(package, self.layout):
            data = package.read(name)
            if not data:
                continue

            decoded = plan.decoder.decode(data)
            if not decoded.ok:
                logger.info("Ignoring %s in %s: %s", name, package.path, decoded.error)
            result.metadata.update(decoded.metadata)
            result.settings.update(decoded.settings)

            if plan.first_only:
                break


def extract_profile(
    path: str | os.PathLike,
    layout: PackageLayout | None = None,
) -> ExtractionResult:
    """Extract a package with a one-off ProfileExtractor."""
    return ProfileExtractor(layout).extract(path)
