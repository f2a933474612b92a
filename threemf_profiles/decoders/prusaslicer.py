from .base import BaseDecoder, decode_text, iter_ini_pairs
from ..models import CanonicalSetting, DecoderStage, DecodeResult, SettingValue
from ..normalize import normalize_value

PRUSASLICER_KEY_MAP: dict[str, CanonicalSetting] = {
    "layer_height": CanonicalSetting.LAYER_HEIGHT,
    "first_layer_height": CanonicalSetting.FIRST_LAYER_HEIGHT,
    "fill_density": CanonicalSetting.INFILL_PERCENTAGE,
    "support_material": CanonicalSetting.SUPPORTS_REQUIRED,
    "temperature": CanonicalSetting.NOZZLE_TEMP,
    "bed_temperature": CanonicalSetting.BED_TEMP,
    "perimeter_speed": CanonicalSetting.PRINT_SPEED,
}


class PrusaSlicerDecoder(BaseDecoder):
    """
    PrusaSlicer / SuperSlicer embedded config (``Metadata/Slic3r_PE.config``).

    Known keys are renamed to their canonical names. Unknown keys are kept
    verbatim so the full profile survives into storage.
    """

    stage = DecoderStage.PRUSASLICER_CONFIG

    def decode(self, raw: bytes) -> DecodeResult:
        settings: dict[str, SettingValue] = {}
        for key, value in iter_ini_pairs(decode_text(raw), "prusaslicer_config"):
            canonical = PRUSASLICER_KEY_MAP.get(key)
            settings[canonical.value if canonical else key] = normalize_value(value)
        return DecodeResult(stage=self.stage, settings=settings)
