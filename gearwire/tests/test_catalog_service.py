from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi import HTTPException

from gearwire.app.core.config import Settings
from gearwire.app.models.device import CustomDeviceCreateRequest, CustomPortRequest, Device
from gearwire.app.models.port import Port
from gearwire.app.services.catalog_service import CatalogError, CatalogService, normalize_id, unique_id


def _write_catalog(tmp_path: Path, devices: list[dict]) -> Path:
    path = tmp_path / "devices.json"
    path.write_text(json.dumps(devices))
    return path


def _midi_port(port_id: str, direction: str = "in", **extra: object) -> dict:
    return {"id": port_id, "direction": direction, "connector": "din_5", "signals": ["midi"], **extra}


def test_builtin_catalog_loads() -> None:
    catalog = CatalogService(catalog_path=Settings().catalog_path)

    assert len(catalog.list_devices()) == 7
    assert catalog.categories() == {
        "Audio Interface": 1,
        "Controller": 1,
        "Drum Machine": 1,
        "Mixer": 1,
        "Studio Monitor": 1,
        "Synthesizer": 2,
    }
    assert [device.id for device in catalog.list_devices("synthesizer")] == ["korg-volca-keys", "behringer-td-3"]
    assert catalog.require_device("yamaha-hs5").is_monitor


def test_builtin_catalog_normalizes_friendly_connectors() -> None:
    catalog = CatalogService(catalog_path=Settings().catalog_path)

    volca = catalog.require_device("korg-volca-keys")
    headphone = volca.find_port("headphone-out")

    assert headphone is not None
    assert headphone.connector == "eighth-inch-TRS"
    assert volca.supports_clock_master is False
    assert catalog.require_device("arturia-keystep").supports_clock_master


def test_unknown_device_is_404() -> None:
    catalog = CatalogService(catalog_path=Settings().catalog_path)

    assert catalog.get_device("moog-one") is None
    with pytest.raises(HTTPException) as exc_info:
        catalog.require_device("moog-one")
    assert exc_info.value.status_code == 404


def test_missing_catalog_file(tmp_path: Path) -> None:
    with pytest.raises(CatalogError) as exc_info:
        CatalogService(catalog_path=tmp_path / "absent.json")

    assert exc_info.value.diagnostics == [f"Device catalog not found: {tmp_path / 'absent.json'}"]


def test_schema_errors_are_reported_with_location(tmp_path: Path) -> None:
    path = _write_catalog(
        tmp_path,
        [{"id": "box", "name": "Box", "ports": [_midi_port("in", direction="sideways")]}],
    )

    with pytest.raises(CatalogError) as exc_info:
        CatalogService(catalog_path=path)

    assert len(exc_info.value.diagnostics) == 1
    assert exc_info.value.diagnostics[0].startswith("0.ports.0.direction: ")


def test_duplicate_ids_and_silent_ports_are_rejected(tmp_path: Path) -> None:
    path = _write_catalog(
        tmp_path,
        [
            {"id": "box", "name": "Box", "ports": [_midi_port("in"), _midi_port("in")]},
            {"id": "box", "name": "Box Again", "ports": [_midi_port("out", direction="out", signals=[])]},
        ],
    )

    with pytest.raises(CatalogError) as exc_info:
        CatalogService(catalog_path=path)

    assert exc_info.value.diagnostics == [
        "Device 'box' declares port 'in' more than once.",
        "Duplicate device id 'box'.",
        "Port 'out' on device 'box' carries no signals.",
    ]


def test_custom_device_ids_never_collide() -> None:
    catalog = CatalogService(catalog_path=Settings().catalog_path)
    request = CustomDeviceCreateRequest(
        name="Korg Volca Keys",
        category="Synthesizer",
        tags=[" modded ", ""],
        ports=[
            CustomPortRequest(label="Out", direction="out", connector="ts_6.35mm", signals=["audio", "audio"]),
            CustomPortRequest(label="Out", direction="out", connector="ts_6.35mm", signals=["audio"]),
            CustomPortRequest(label="***", direction="in", connector="din_5", signals=["midi"]),
        ],
    )

    first = catalog.create_custom_device(request)
    second = catalog.create_custom_device(request)

    assert first.id == "korg-volca-keys-2"
    assert second.id == "korg-volca-keys-3"
    assert [port.id for port in first.ports] == ["out", "out-2", "port-3"]
    assert first.ports[0].signals == ["audio"]
    assert first.tags == ["modded"]
    assert catalog.list_devices()[0].id == "korg-volca-keys-2"
    assert len(catalog.list_devices("Synthesizer")) == 4


def test_id_helpers() -> None:
    assert normalize_id("  Moog Sub 37!  ") == "moog-sub-37"
    assert unique_id("box", set()) == "box"
    assert unique_id("box", {"box", "box-2"}) == "box-3"


def test_clock_master_needs_a_midi_capable_sending_port() -> None:
    duplex = Device(id="duplex", name="Duplex", ports=[Port(**_midi_port("midi", direction="in_out"))])
    listener = Device(id="listener", name="Listener", ports=[Port(**_midi_port("midi"))])
    usb_only = Device(
        id="usb-only",
        name="USB Only",
        ports=[Port(id="usb", direction="out", connector="usb_b", signals=["usb_midi"])],
    )

    assert duplex.supports_clock_master
    assert not listener.supports_clock_master
    assert not usb_only.supports_clock_master
