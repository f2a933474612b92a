from typing import Any

from .models import CanonicalSetting


def profile_summary(settings: dict[str, Any]) -> dict[str, Any]:
    """
    Short display form of the canonical settings.

    Only settings that are present (and not None) appear in the result:
    ``layer_height`` as-is, ``infill`` as ``"15%"``, ``supports`` as
    ``"Yes"``/``"No"``, temperatures with ``"°C"`` and ``speed`` in mm/s.
    """
    summary: dict[str, Any] = {}

    layer_height = settings.get(CanonicalSetting.LAYER_HEIGHT.value)
    if layer_height is not None:
        summary["layer_height"] = layer_height

    infill = settings.get(CanonicalSetting.INFILL_PERCENTAGE.value)
    if infill is not None:
        summary["infill"] = f"{infill}%"

    supports = settings.get(CanonicalSetting.SUPPORTS_REQUIRED.value)
    if supports is not None:
        summary["supports"] = "Yes" if supports else "No"

    nozzle = settings.get(CanonicalSetting.NOZZLE_TEMP.value)
    if nozzle is not None:
        summary["nozzle_temp"] = f"{nozzle}°C"

    bed = settings.get(CanonicalSetting.BED_TEMP.value)
    if bed is not None:
        summary["bed_temp"] = f"{bed}°C"

    speed = settings.get(CanonicalSetting.PRINT_SPEED.value)
    if speed is not None:
        summary["speed"] = f"{speed} mm/s"

    return summary
