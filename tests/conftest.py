"""Shared fixtures: build 3MF packages on disk from a name -> content mapping."""

import zipfile
from pathlib import Path

import pytest

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="model" ContentType="application/vnd.ms-package.3dmanufacturing-3dmodel+xml"/>'
    "</Types>"
)

MODEL_XML = """<?xml version="1.0" encoding="UTF-8"?>
<model unit="millimeter" xml:lang="en-US" xmlns="http://schemas.microsoft.com/3dmanufacturing/core/2015/02">
  <metadata name="Title">Benchy</metadata>
  <metadata name="Designer">CreativeTools</metadata>
  <metadata name="">ignored</metadata>
  <resources>
    <object id="1" type="model"><mesh><vertices/><triangles/></mesh></object>
    <object id="2" type="model"><mesh><vertices/><triangles/></mesh></object>
  </resources>
  <build><item objectid="1"/><item objectid="2"/></build>
</model>
"""

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def write_3mf(path: Path, entries: dict[str, str | bytes]) -> Path:
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


def base_entries(**extra: str | bytes) -> dict[str, str | bytes]:
    entries: dict[str, str | bytes] = {
        "[Content_Types].xml": CONTENT_TYPES,
        "3D/3dmodel.model": MODEL_XML,
    }
    entries.update(extra)
    return entries


@pytest.fixture
def make_3mf(tmp_path):
    """Factory: make_3mf(entries, name="model.3mf") -> Path."""

    def _make(entries: dict[str, str | bytes], name: str = "model.3mf") -> Path:
        return write_3mf(tmp_path / name, entries)

    return _make
