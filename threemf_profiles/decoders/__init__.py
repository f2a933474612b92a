from .base import BaseDecoder
from .metadata_xml import MetadataXmlDecoder
from .gcode import GcodeCommentDecoder, GCODE_KEY_MAP
from .bambu import BambuConfigDecoder, BAMBU_KEY_MAP
from .prusaslicer import PrusaSlicerDecoder, PRUSASLICER_KEY_MAP

__all__ = [
    "BaseDecoder",
    "MetadataXmlDecoder",
    "GcodeCommentDecoder",
    "BambuConfigDecoder",
    "PrusaSlicerDecoder",
    "GCODE_KEY_MAP",
    "BAMBU_KEY_MAP",
    "PRUSASLICER_KEY_MAP",
]
