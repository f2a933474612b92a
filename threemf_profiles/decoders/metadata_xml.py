from .base import BaseDecoder
from ..descriptor import collect_metadata, parse_xml
from ..models import DecoderStage, DecodeResult


class MetadataXmlDecoder(BaseDecoder):
    """Loose ``Metadata/*.xml`` files holding ``<metadata name="...">`` pairs.

    Contributes to the package metadata, not to settings.
    """

    stage = DecoderStage.METADATA_XML

    def decode(self, raw: bytes) -> DecodeResult:
        root = parse_xml(raw)
        if root is None:
            return self._empty("malformed XML")
        return DecodeResult(stage=self.stage, metadata=collect_metadata(root))
