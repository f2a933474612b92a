"""Tests for full-package extraction and stage precedence."""

import json
import zipfile

from conftest import PNG_BYTES, base_entries

from threemf_profiles.models import DecoderStage
from threemf_profiles.pipeline import DECODER_STAGES, ProfileExtractor, extract_profile

GCODE = (
    "; HEADER_BLOCK_START\n"
    "; layer_height = 0.2mm\n"
    "; infill_density = 15%\n"
    "; nozzle_temperature = 220\n"
    "; travel_speed = 300\n"
    "; foo = bar\n"
    "G28\n"
)

BAMBU_JSON = json.dumps({
    "layer_height": "0.16",
    "sparse_infill_density": "20%",
    "enable_support": "1",
    "bed_temperature": ["65"],
})

PRUSA_CONFIG = (
    "; generated by PrusaSlicer 2.6.1\n"
    "layer_height = 0.3\n"
    "temperature = 215\n"
    "perimeters = 3\n"
)

METADATA_XML = (
    '<config><metadata name="Application">BambuStudio-01.09</metadata>'
    '<metadata name="Title">Benchy v2</metadata></config>'
)


class TestDecoderStages:
    def test_merge_order(self):
        assert DECODER_STAGES == (
            DecoderStage.METADATA_XML,
            DecoderStage.GCODE_COMMENTS,
            DecoderStage.BAMBU_CONFIG,
            DecoderStage.PRUSASLICER_CONFIG,
        )


class TestExtractProfile:
    def test_package_without_metadata_dir(self, make_3mf):
        result = extract_profile(make_3mf(base_entries()))
        assert result.error is None
        assert result.settings == {}
        assert result.model_count == 2
        assert result.metadata == {"Title": "Benchy", "Designer": "CreativeTools"}
        assert not result.has_thumbnail
        assert result.thumbnail_entry_name is None

    def test_missing_file_is_fatal(self, tmp_path):
        result = extract_profile(tmp_path / "nope.3mf")
        assert result.error == "File not found"
        assert result.settings == {}
        assert result.model_count == 0

    def test_not_a_zip_is_fatal(self, tmp_path):
        path = tmp_path / "bad.3mf"
        path.write_text("not a zip")
        result = extract_profile(path)
        assert result.error == "Failed to open .3mf file"
        assert result.settings == {}
        assert result.metadata == {}

    def test_bambu_package(self, make_3mf):
        path = make_3mf(base_entries(**{
            "Metadata/plate_1.gcode": GCODE,
            "Metadata/model_settings.config": BAMBU_JSON,
            "Metadata/slice_info.xml": METADATA_XML,
            "Metadata/plate_1.png": PNG_BYTES,
        }))
        result = extract_profile(path)
        assert result.error is None
        assert result.settings == {
            "layer_height": 0.16,
            "infill_percentage": 20,
            "nozzle_temp": 220,
            "travel_speed": 300,
            "supports_required": True,
            "bed_temp": 65,
        }
        assert result.metadata == {
            "Title": "Benchy v2",
            "Designer": "CreativeTools",
            "Application": "BambuStudio-01.09",
        }
        assert result.has_thumbnail
        assert result.thumbnail_entry_name == "Metadata/plate_1.png"

    def test_prusaslicer_overrides_earlier_stages(self, make_3mf):
        path = make_3mf(base_entries(**{
            "Metadata/plate_1.gcode": GCODE,
            "Metadata/model_settings.config": BAMBU_JSON,
            "Metadata/Slic3r_PE.config": PRUSA_CONFIG,
        }))
        settings = extract_profile(path).settings
        assert settings["layer_height"] == 0.3
        assert settings["nozzle_temp"] == 215
        assert settings["perimeters"] == 3
        assert settings["infill_percentage"] == 20

    def test_gcode_plates_scanned_in_entry_order(self, make_3mf):
        path = make_3mf(base_entries(**{
            "Metadata/plate_2.gcode": "; layer_height = 0.12\n; bed_temperature = 55\n",
            "Metadata/plate_1.gcode": "; layer_height = 0.28\n",
        }))
        settings = extract_profile(path).settings
        assert settings == {"layer_height": 0.28, "bed_temp": 55}

    def test_gcode_outside_metadata_dir_ignored(self, make_3mf):
        path = make_3mf(base_entries(**{"plate_1.gcode": "; layer_height = 0.28\n"}))
        assert extract_profile(path).settings == {}

    def test_first_prusaslicer_config_wins(self, make_3mf):
        path = make_3mf(base_entries(**{
            "Metadata/Slic3r_PE.config": "layer_height = 0.1\n",
            "Metadata/PrusaSlicer.config": "layer_height = 0.3\nother_key = 1\n",
        }))
        assert extract_profile(path).settings == {"layer_height": 0.1}

    def test_empty_first_prusaslicer_config_falls_through(self, make_3mf):
        path = make_3mf(base_entries(**{
            "Metadata/Slic3r_PE.config": "",
            "Metadata/PrusaSlicer.config": "layer_height = 0.3\n",
        }))
        assert extract_profile(path).settings == {"layer_height": 0.3}

    def test_corrupt_vendor_blocks_do_not_sink_extraction(self, make_3mf):
        path = make_3mf(base_entries(**{
            "Metadata/model_settings.config": b"\xff\xfe{ garbage",
            "Metadata/broken.xml": "<config><metadata name='x'>",
            "Metadata/PrusaSlicer.config": "layer_height = 0.2\n",
        }))
        result = extract_profile(path)
        assert result.error is None
        assert result.model_count == 2
        assert result.metadata["Title"] == "Benchy"
        assert result.settings == {"layer_height": 0.2}

    def test_hostile_values_do_not_sink_extraction(self, make_3mf):
        path = make_3mf(base_entries(**{
            "Metadata/plate_1.gcode": "; layer_height = 1e400\n; infill_density = 15%\n",
            "Metadata/model_settings.config": "[" * 200_000,
        }))
        result = extract_profile(path)
        assert result.error is None
        assert result.model_count == 2
        assert result.settings == {"layer_height": "1e400", "infill_percentage": 15}

    def test_malformed_descriptor_still_extracts_settings(self, make_3mf):
        path = make_3mf({
            "[Content_Types].xml": "<Types/>",
            "3D/3dmodel.model": "<model><object>",
            "Metadata/PrusaSlicer.config": "fill_density = 15%\n",
        })
        result = extract_profile(path)
        assert result.model_count == 0
        assert result.settings == {"infill_percentage": 15}

    def test_unreadable_entry_degrades(self, tmp_path):
        path = tmp_path / "crc.3mf"
        with zipfile.ZipFile(path, "w", zipfile.ZIP_STORED) as zf:
            for name, content in base_entries(**{
                "Metadata/plate_1.gcode": "; layer_height = 0.2\n",
                "Metadata/model_settings.config": "wall_loops = 7\n",
            }).items():
                zf.writestr(name, content)
        raw = path.read_bytes()
        assert raw.count(b"wall_loops = 7") == 1
        path.write_bytes(raw.replace(b"wall_loops = 7", b"wall_loops = 9"))

        result = extract_profile(path)
        assert result.error is not None
        assert result.error.startswith("Error parsing .3mf: ")
        assert result.model_count == 2
        assert result.settings == {"layer_height": 0.2}

    def test_generic_thumbnail_detected(self, make_3mf):
        path = make_3mf(base_entries(**{"Metadata/thumbnail.png": PNG_BYTES}))
        result = extract_profile(path)
        assert result.has_thumbnail
        assert result.thumbnail_entry_name == "Metadata/thumbnail.png"

    def test_repeated_extraction_is_identical(self, make_3mf):
        path = make_3mf(base_entries(**{
            "Metadata/plate_1.gcode": GCODE,
            "Metadata/Slic3r_PE.config": PRUSA_CONFIG,
        }))
        extractor = ProfileExtractor()
        assert extractor.extract(path) == extractor.extract(path)

    def test_settings_json_round_trips(self, make_3mf):
        path = make_3mf(base_entries(**{"Metadata/Slic3r_PE.config": PRUSA_CONFIG}))
        result = extract_profile(path)
        assert json.loads(result.settings_json()) == result.settings

    def test_summary(self, make_3mf):
        path = make_3mf(base_entries(**{"Metadata/plate_1.gcode": GCODE}))
        assert extract_profile(path).summary() == {
            "layer_height": 0.2,
            "infill": "15%",
            "nozzle_temp": "220°C",
        }


class TestProfileExtractor:
    def test_validate_delegates(self, make_3mf, tmp_path):
        extractor = ProfileExtractor()
        assert extractor.validate(make_3mf(base_entries())).valid
        assert not extractor.validate(tmp_path / "missing.3mf").valid

    def test_extract_thumbnail_delegates(self, make_3mf, tmp_path):
        path = make_3mf(base_entries(**{"Metadata/plate_1.png": PNG_BYTES}))
        out = tmp_path / "preview.png"
        assert ProfileExtractor().extract_thumbnail(path, out)
        assert out.read_bytes() == PNG_BYTES
