from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator


class PortDirection(StrEnum):
    IN = "in"
    OUT = "out"
    IN_OUT = "in_out"


class PhysicalConnector(StrEnum):
    TS_6_35 = "6.35mm-ts"
    TRS_6_35 = "6.35mm-trs"
    XLR = "xlr"
    RCA = "rca"
    TRS_3_5 = "3.5mm-trs"
    DIN5 = "din5"
    TRS_MIDI = "trs-midi"


class PortConnector(StrEnum):
    DIN_5 = "din_5"
    TRS_3_5MM = "trs_3.5mm"
    TS_6_35MM = "ts_6.35mm"
    TRS_6_35MM = "trs_6.35mm"
    USB_C = "usb_c"
    USB_B = "usb_b"
    USB_A = "usb_a"
    XLR = "xlr"
    COMBO_XLR_TRS = "combo_xlr_trs"
    SYNC_OUT = "sync_out"
    SYNC_IN = "sync_in"
    CV_GATE = "cv_gate"
    QUARTER_INCH_TS = "quarter-inch-TS"
    QUARTER_INCH_TRS = "quarter-inch-TRS"
    EIGHTH_INCH_TRS = "eighth-inch-TRS"
    # Canonical physical codes are valid connector codes too.
    TS_6_35 = "6.35mm-ts"
    TRS_6_35 = "6.35mm-trs"
    RCA = "rca"
    TRS_3_5 = "3.5mm-trs"
    DIN5 = "din5"
    TRS_MIDI = "trs-midi"


class PortSignal(StrEnum):
    AUDIO = "audio"
    MIDI = "midi"
    SYNC = "sync"
    USB_AUDIO = "usb_audio"
    USB_MIDI = "usb_midi"
    CV = "cv"


class PortDomain(StrEnum):
    AUDIO = "audio"
    MIDI = "midi"


class AudioWiring(StrEnum):
    BALANCED_MONO = "balanced_mono"
    UNBALANCED_MONO = "unbalanced_mono"
    UNBALANCED_STEREO = "unbalanced_stereo"


OUTPUT_DIRECTIONS = frozenset({PortDirection.OUT, PortDirection.IN_OUT})
INPUT_DIRECTIONS = frozenset({PortDirection.IN, PortDirection.IN_OUT})
AUDIO_SIGNALS = frozenset({PortSignal.AUDIO, PortSignal.USB_AUDIO})
MIDI_SIGNALS = frozenset({PortSignal.MIDI, PortSignal.USB_MIDI})

# Friendly physical names used by older catalog records.
FRIENDLY_PHYSICAL_NAMES: dict[str, PhysicalConnector] = {
    "quarter-inch-TS": PhysicalConnector.TS_6_35,
    "quarter-inch-TRS": PhysicalConnector.TRS_6_35,
    "eighth-inch-TRS": PhysicalConnector.TRS_3_5,
}


class Port(BaseModel):
    id: str = Field(min_length=1)
    label: str = ""
    direction: PortDirection
    connector: PortConnector
    signals: list[PortSignal] = Field(default_factory=list)
    domain: PortDomain | None = None
    audio_wiring: AudioWiring | None = None
    physical_connector: PhysicalConnector | None = None
    notes: str | None = None

    @field_validator("physical_connector", mode="before")
    @classmethod
    def normalize_physical_connector(cls, value: object) -> object:
        if isinstance(value, str):
            return FRIENDLY_PHYSICAL_NAMES.get(value, value)
        return value

    @model_validator(mode="after")
    def default_label(self) -> "Port":
        if not self.label:
            self.label = self.id
        return self

    @property
    def is_output(self) -> bool:
        return self.direction in OUTPUT_DIRECTIONS

    @property
    def is_input(self) -> bool:
        return self.direction in INPUT_DIRECTIONS

    def carries(self, *signals: PortSignal) -> bool:
        return any(signal in self.signals for signal in signals)
