from __future__ import annotations

from gearwire.app.core.config import Settings
from gearwire.app.models.device import DeviceInstance
from gearwire.app.services.catalog_service import CatalogService
from gearwire.app.services.compatibility_service import CompatibilityService
from gearwire.app.services.inference_service import InferenceService
from gearwire.app.services.recommendation_service import RecommendationService

CATALOG = CatalogService(catalog_path=Settings().catalog_path)


def _service() -> RecommendationService:
    return RecommendationService(InferenceService(CompatibilityService()))


def test_minijack_synth_into_interface() -> None:
    recommendations = _service().recommend_between(
        CATALOG.require_device("korg-volca-keys"),
        CATALOG.require_device("focusrite-scarlett-2i2"),
    )

    assert recommendations == ["Volca Keys → Scarlett 2i2: Use TRS stereo breakout cable"]


def test_pairings_run_in_both_directions() -> None:
    recommendations = _service().recommend_between(
        CATALOG.require_device("arturia-keystep"),
        CATALOG.require_device("elektron-digitakt"),
    )

    assert recommendations == [
        "Digitakt → Keystep: Use TRS-A to DIN-5 MIDI cable",
        "Digitakt → Keystep: Use USB MIDI USB-B cable",
        "Keystep → Digitakt: Use TRS-A to DIN-5 MIDI cable",
        "Keystep → Digitakt: Use USB MIDI USB-B cable",
    ]


def test_devices_without_outputs_get_nothing() -> None:
    monitor = CATALOG.require_device("yamaha-hs5")

    assert _service().recommend_between(monitor, monitor) == []


def test_workspace_recommendations_cover_every_pair() -> None:
    instances = [
        DeviceInstance(instance_id=f"{device_id}-1", device=CATALOG.require_device(device_id))
        for device_id in ("korg-volca-keys", "focusrite-scarlett-2i2", "yamaha-hs5")
    ]

    assert _service().recommend_for_instances(instances) == [
        "Scarlett 2i2 → HS5: Use audio 6.35 mm TRS cable",
        "Volca Keys → HS5: Use TRS stereo breakout cable",
        "Volca Keys → Scarlett 2i2: Use TRS stereo breakout cable",
    ]


def test_single_device_workspace_has_no_recommendations() -> None:
    instance = DeviceInstance(instance_id="solo", device=CATALOG.require_device("behringer-td-3"))

    assert _service().recommend_for_instances([instance]) == []
