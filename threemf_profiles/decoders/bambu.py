import json
import logging
from typing import Any

from .base import BaseDecoder, decode_text, iter_ini_pairs
from ..models import CanonicalSetting, DecoderStage, DecodeResult, SettingValue
from ..normalize import coerce_setting, normalize_value

logger = logging.getLogger(__name__)

BAMBU_KEY_MAP: dict[str, CanonicalSetting] = {
    "layer_height": CanonicalSetting.LAYER_HEIGHT,
    "sparse_infill_density": CanonicalSetting.INFILL_PERCENTAGE,
    "enable_support": CanonicalSetting.SUPPORTS_REQUIRED,
    "nozzle_temperature": CanonicalSetting.NOZZLE_TEMP,
    "bed_temperature": CanonicalSetting.BED_TEMP,
}


def _load_json_object(text: str) -> dict[str, Any] | None:
    """Return the payload as a JSON object, or None if it is not one."""
    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return data if isinstance(data, dict) else None


class BambuConfigDecoder(BaseDecoder):
    """
    BambuStudio / OrcaSlicer project config.

    The payload is JSON in most releases; older and third-party exports
    write ``key = value`` lines instead. JSON is tried first and only the
    keys in BAMBU_KEY_MAP are taken from it. The INI form keeps every key.
    """

    stage = DecoderStage.BAMBU_CONFIG

    def decode(self, raw: bytes) -> DecodeResult:
        text = decode_text(raw)
        data = _load_json_object(text)
        if data is not None:
            return DecodeResult(stage=self.stage, settings=self._from_json(data))

        logger.debug("Bambu config is not JSON, scanning as key = value lines")
        settings: dict[str, SettingValue] = {
            key: normalize_value(value) for key, value in iter_ini_pairs(text, "bambu_config")
        }
        return DecodeResult(stage=self.stage, settings=settings)

    def _from_json(self, data: dict[str, Any]) -> dict[str, SettingValue]:
        settings: dict[str, SettingValue] = {}
        for json_key, canonical in BAMBU_KEY_MAP.items():
            if json_key not in data:
                continue
            value = coerce_setting(data[json_key])
            if value is not None:
                settings[canonical.value] = value
        return settings
