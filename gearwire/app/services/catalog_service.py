from __future__ import annotations

import logging
import re
from collections import defaultdict
from pathlib import Path

from fastapi import HTTPException
from pydantic import TypeAdapter, ValidationError

from gearwire.app.models.device import CustomDeviceCreateRequest, Device
from gearwire.app.models.port import Port

logger = logging.getLogger(__name__)

DEVICE_LIST_ADAPTER = TypeAdapter(list[Device])


class CatalogError(Exception):
    def __init__(self, diagnostics: list[str]):
        self.diagnostics = diagnostics
        super().__init__("Device catalog failed to load")


def normalize_id(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")


def unique_id(base: str, existing: set[str]) -> str:
    if base not in existing:
        return base
    suffix = 2
    while f"{base}-{suffix}" in existing:
        suffix += 1
    return f"{base}-{suffix}"


class CatalogService:
    def __init__(self, catalog_path: Path) -> None:
        self._catalog_path = catalog_path
        self._catalog = {device.id: device for device in self._load_catalog(catalog_path)}
        self._custom: dict[str, Device] = {}
        logger.info("Loaded %d devices from %s", len(self._catalog), catalog_path)

    def list_devices(self, category: str | None = None) -> list[Device]:
        devices = [*self._custom.values(), *self._catalog.values()]
        if category:
            devices = [device for device in devices if (device.category or "").lower() == category.lower()]
        return devices

    def get_device(self, device_id: str) -> Device | None:
        return self._custom.get(device_id) or self._catalog.get(device_id)

    def require_device(self, device_id: str) -> Device:
        device = self.get_device(device_id)
        if not device:
            raise HTTPException(status_code=404, detail=f"Device '{device_id}' not found")
        return device

    def categories(self) -> dict[str, int]:
        counters: dict[str, int] = defaultdict(int)
        for device in self.list_devices():
            counters[device.category or "Uncategorized"] += 1
        return dict(sorted(counters.items(), key=lambda kv: kv[0]))

    def create_custom_device(self, request: CustomDeviceCreateRequest) -> Device:
        existing_ids = {*self._catalog, *self._custom}
        device_id = unique_id(normalize_id(request.name) or "custom-device", existing_ids)

        ports: list[Port] = []
        port_ids: set[str] = set()
        for index, port_request in enumerate(request.ports, start=1):
            port_id = unique_id(normalize_id(port_request.label) or f"port-{index}", port_ids)
            port_ids.add(port_id)
            ports.append(
                Port(
                    id=port_id,
                    label=port_request.label.strip(),
                    direction=port_request.direction,
                    connector=port_request.connector,
                    signals=list(dict.fromkeys(port_request.signals)),
                    notes=port_request.notes,
                )
            )

        device = Device(
            id=device_id,
            name=request.name.strip(),
            manufacturer=request.manufacturer,
            category=request.category,
            description=request.description,
            tags=[tag.strip() for tag in request.tags if tag.strip()],
            ports=ports,
        )
        self._custom[device.id] = device
        logger.info("Created custom device '%s' with %d ports", device.id, len(device.ports))
        return device

    @staticmethod
    def _load_catalog(path: Path) -> list[Device]:
        if not path.is_file():
            raise CatalogError([f"Device catalog not found: {path}"])

        try:
            devices = DEVICE_LIST_ADAPTER.validate_json(path.read_bytes())
        except ValidationError as error:
            raise CatalogError(
                [f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()]
            ) from error

        diagnostics = CatalogService._check_devices(devices)
        if diagnostics:
            raise CatalogError(diagnostics)
        return devices

    @staticmethod
    def _check_devices(devices: list[Device]) -> list[str]:
        diagnostics: list[str] = []
        seen_devices: set[str] = set()
        for device in devices:
            if device.id in seen_devices:
                diagnostics.append(f"Duplicate device id '{device.id}'.")
            seen_devices.add(device.id)

            seen_ports: set[str] = set()
            for port in device.ports:
                if port.id in seen_ports:
                    diagnostics.append(f"Device '{device.id}' declares port '{port.id}' more than once.")
                seen_ports.add(port.id)
                if not port.signals:
                    diagnostics.append(f"Port '{port.id}' on device '{device.id}' carries no signals.")
        return diagnostics
