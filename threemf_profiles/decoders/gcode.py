import re

from .base import BaseDecoder, decode_text
from ..models import CanonicalSetting, DecoderStage, DecodeResult, SettingValue
from ..normalize import normalize_value

# "; key = value" header comments written by slicers into plate G-code
_COMMENT_SETTING = re.compile(r"^;\s*(\w+)\s*=\s*(.+)")

GCODE_KEY_MAP: dict[str, CanonicalSetting] = {
    "layer_height": CanonicalSetting.LAYER_HEIGHT,
    "first_layer_height": CanonicalSetting.FIRST_LAYER_HEIGHT,
    "infill_density": CanonicalSetting.INFILL_PERCENTAGE,
    "fill_density": CanonicalSetting.INFILL_PERCENTAGE,
    "support_material": CanonicalSetting.SUPPORTS_REQUIRED,
    "support_enable": CanonicalSetting.SUPPORTS_REQUIRED,
    "nozzle_temperature": CanonicalSetting.NOZZLE_TEMP,
    "bed_temperature": CanonicalSetting.BED_TEMP,
    "print_speed": CanonicalSetting.PRINT_SPEED,
    "travel_speed": CanonicalSetting.TRAVEL_SPEED,
}


class GcodeCommentDecoder(BaseDecoder):
    """
    Settings embedded as comments in machine-control text.

    Only keys in GCODE_KEY_MAP are kept; everything else in the G-code
    header is noise for our purposes and is dropped.
    """

    stage = DecoderStage.GCODE_COMMENTS

    def decode(self, raw: bytes) -> DecodeResult:
        settings: dict[str, SettingValue] = {}
        for line in decode_text(raw).splitlines():
            match = _COMMENT_SETTING.match(line.strip())
            if not match:
                continue
            canonical = GCODE_KEY_MAP.get(match.group(1))
            if canonical is None:
                continue
            settings[canonical.value] = normalize_value(match.group(2).strip())
        return DecodeResult(stage=self.stage, settings=settings)
