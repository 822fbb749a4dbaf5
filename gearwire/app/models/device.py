from __future__ import annotations

from pydantic import BaseModel, Field

from gearwire.app.models.port import AUDIO_SIGNALS, MIDI_SIGNALS, Port, PortConnector, PortDirection, PortSignal

MONITOR_TAG = "monitor"
NO_TEST_SOUND_TAG = "no_test_sound"


class Device(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    manufacturer: str | None = None
    category: str | None = None
    description: str | None = None
    ports: list[Port] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    def find_port(self, port_id: str) -> Port | None:
        for port in self.ports:
            if port.id == port_id:
                return port
        return None

    @property
    def is_monitor(self) -> bool:
        if any(tag.lower() == MONITOR_TAG for tag in self.tags):
            return True
        return bool(self.category) and MONITOR_TAG in self.category.lower()

    @property
    def has_audio_output(self) -> bool:
        return any(port.is_output and port.carries(PortSignal.AUDIO) for port in self.ports)

    @property
    def has_midi(self) -> bool:
        return any(port.carries(*MIDI_SIGNALS) for port in self.ports)

    @property
    def supports_clock_master(self) -> bool:
        return any(port.is_output and port.carries(PortSignal.MIDI) for port in self.ports)

    @property
    def supports_test_tone(self) -> bool:
        if NO_TEST_SOUND_TAG in self.tags:
            return False
        return any(port.is_output and port.carries(*AUDIO_SIGNALS) for port in self.ports)


class DeviceInstance(BaseModel):
    instance_id: str = Field(min_length=1)
    device: Device


class CustomPortRequest(BaseModel):
    label: str = Field(min_length=1, max_length=64)
    direction: PortDirection
    connector: PortConnector
    signals: list[PortSignal] = Field(min_length=1)
    notes: str | None = None


class CustomDeviceCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    manufacturer: str | None = None
    category: str | None = None
    description: str | None = Field(default=None, max_length=2_048)
    tags: list[str] = Field(default_factory=list)
    ports: list[CustomPortRequest] = Field(min_length=1, max_length=64)
