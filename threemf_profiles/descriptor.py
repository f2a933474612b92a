"""
Readers for the XML documents inside a package: the ``*.model`` descriptor
and the loose metadata XML files under ``Metadata/``.

Parsing is lenient. A document that does not parse yields an empty result
rather than an exception.
"""

import logging
import xml.etree.ElementTree as ET
from typing import NamedTuple

logger = logging.getLogger(__name__)

OBJECT_TAG = "object"
METADATA_TAG = "metadata"


class DescriptorInfo(NamedTuple):
    model_count: int
    metadata: dict[str, str]


def _local_name(tag) -> str:
    # Comments and processing instructions carry a callable tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def parse_xml(data: bytes) -> ET.Element | None:
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        logger.debug("Ignoring malformed XML: %s", e)
        return None


def collect_metadata(root: ET.Element) -> dict[str, str]:
    """Map each ``<metadata name="...">`` element to its text, at any depth.

    Elements without a name are skipped; a repeated name keeps the last value.
    """
    metadata: dict[str, str] = {}
    for elem in root.iter():
        if _local_name(elem.tag) != METADATA_TAG:
            continue
        name = elem.get("name", "")
        if name:
            metadata[name] = "".join(elem.itertext())
    return metadata


def parse_model_xml(data: bytes) -> DescriptorInfo:
    """Count ``object`` elements and collect metadata from a model descriptor."""
    root = parse_xml(data)
    if root is None:
        return DescriptorInfo(0, {})
    count = sum(1 for elem in root.iter() if _local_name(elem.tag) == OBJECT_TAG)
    return DescriptorInfo(count, collect_metadata(root))
