from __future__ import annotations

from dataclasses import dataclass, field

from gearwire.app.models.port import (
    AudioWiring,
    PhysicalConnector,
    Port,
    PortConnector,
    PortDomain,
    PortSignal,
)

LEGACY_CONNECTOR_MAP: dict[PortConnector, PhysicalConnector | None] = {
    PortConnector.DIN_5: PhysicalConnector.DIN5,
    PortConnector.TRS_3_5MM: PhysicalConnector.TRS_3_5,
    PortConnector.TS_6_35MM: PhysicalConnector.TS_6_35,
    PortConnector.TRS_6_35MM: PhysicalConnector.TRS_6_35,
    PortConnector.COMBO_XLR_TRS: PhysicalConnector.TRS_6_35,
    PortConnector.XLR: PhysicalConnector.XLR,
    PortConnector.QUARTER_INCH_TS: PhysicalConnector.TS_6_35,
    PortConnector.QUARTER_INCH_TRS: PhysicalConnector.TRS_6_35,
    PortConnector.EIGHTH_INCH_TRS: PhysicalConnector.TRS_3_5,
    PortConnector.TS_6_35: PhysicalConnector.TS_6_35,
    PortConnector.TRS_6_35: PhysicalConnector.TRS_6_35,
    PortConnector.RCA: PhysicalConnector.RCA,
    PortConnector.TRS_3_5: PhysicalConnector.TRS_3_5,
    PortConnector.DIN5: PhysicalConnector.DIN5,
    PortConnector.TRS_MIDI: PhysicalConnector.TRS_MIDI,
    PortConnector.USB_C: None,
    PortConnector.USB_B: None,
    PortConnector.USB_A: None,
    PortConnector.SYNC_OUT: None,
    PortConnector.SYNC_IN: None,
    PortConnector.CV_GATE: None,
}

ADAPTER_MATRIX: dict[frozenset[PhysicalConnector], tuple[str, ...]] = {
    frozenset({PhysicalConnector.TRS_3_5, PhysicalConnector.TRS_6_35}): ("stereo-breakout-cable",),
    frozenset({PhysicalConnector.TRS_3_5, PhysicalConnector.TS_6_35}): ("stereo-breakout-cable",),
    frozenset({PhysicalConnector.TRS_MIDI, PhysicalConnector.DIN5}): ("trs-midi-to-din5",),
}

ADAPTER_LABELS: dict[str, str] = {
    "stereo-breakout-cable": "TRS stereo breakout cable",
    "trs-midi-to-din5": "TRS-A to DIN-5 MIDI cable",
}

# A TRS plug seats in a TS jack and vice versa; the shared contacts carry a mono signal.
PHONE_JACK_6_35 = frozenset({PhysicalConnector.TS_6_35, PhysicalConnector.TRS_6_35})

COMBO_JACK_MATCHES: dict[PortConnector, PhysicalConnector] = {
    PortConnector.TRS_6_35MM: PhysicalConnector.TRS_6_35,
    PortConnector.TS_6_35MM: PhysicalConnector.TS_6_35,
}

CONNECTOR_LABELS: dict[str, str] = {
    PortConnector.DIN_5: "5-pin DIN MIDI",
    PortConnector.DIN5: "DIN-5 MIDI",
    PortConnector.TRS_3_5MM: "3.5 mm TRS",
    PortConnector.TRS_3_5: "3.5 mm TRS",
    PortConnector.EIGHTH_INCH_TRS: "3.5 mm TRS",
    PortConnector.TS_6_35MM: "6.35 mm TS",
    PortConnector.TS_6_35: "6.35 mm TS",
    PortConnector.QUARTER_INCH_TS: "6.35 mm TS",
    PortConnector.TRS_6_35MM: "6.35 mm TRS",
    PortConnector.TRS_6_35: "6.35 mm TRS",
    PortConnector.QUARTER_INCH_TRS: "6.35 mm TRS",
    PortConnector.RCA: "RCA",
    PortConnector.USB_C: "USB-C",
    PortConnector.USB_B: "USB-B",
    PortConnector.USB_A: "USB-A",
    PortConnector.XLR: "XLR",
    PortConnector.COMBO_XLR_TRS: "combo XLR/TRS",
    PortConnector.TRS_MIDI: "TRS MIDI",
    PortConnector.SYNC_OUT: "sync pulse",
    PortConnector.SYNC_IN: "sync pulse",
    PortConnector.CV_GATE: "CV/Gate",
}

SIGNAL_LABELS: dict[str, str] = {
    PortSignal.AUDIO: "audio",
    PortSignal.MIDI: "MIDI",
    PortSignal.SYNC: "clock",
    PortSignal.USB_AUDIO: "USB audio",
    PortSignal.USB_MIDI: "USB MIDI",
    PortSignal.CV: "CV",
}


@dataclass(slots=True)
class ConnectorCompatibility:
    compatible: bool
    resulting_connector: str | None = None
    adapter_codes: list[str] = field(default_factory=list)

    @property
    def needs_adapter(self) -> bool:
        return bool(self.adapter_codes)


def describe_connector(connector: str) -> str:
    return CONNECTOR_LABELS.get(connector, str(connector))


def describe_signal(signal: str) -> str:
    return SIGNAL_LABELS.get(signal, str(signal))


def join_labels(labels: list[str]) -> str:
    if len(labels) == 1:
        return labels[0]
    return f"{', '.join(labels[:-1])} and {labels[-1]}"


def format_signals(signals: list[PortSignal]) -> str:
    if not signals:
        return "no signals"
    return join_labels([describe_signal(signal) for signal in signals])


def describe_adapter(code: str) -> str:
    return ADAPTER_LABELS.get(code, code)


def format_adapter_chain(codes: list[str]) -> str:
    return " + ".join(describe_adapter(code) for code in codes)


class CompatibilityService:
    """Decides whether two ports can be joined, and with what.

    Every lookup is total: an unknown connector or an unmatched pair yields an
    incompatible verdict rather than an exception.
    """

    @staticmethod
    def physical_connector(port: Port) -> PhysicalConnector | None:
        if port.physical_connector:
            return port.physical_connector
        return LEGACY_CONNECTOR_MAP.get(port.connector)

    @staticmethod
    def port_domain(port: Port) -> PortDomain | None:
        if port.domain:
            return port.domain
        if PortSignal.AUDIO in port.signals:
            return PortDomain.AUDIO
        if PortSignal.MIDI in port.signals:
            return PortDomain.MIDI
        return None

    @staticmethod
    def audio_wiring(port: Port) -> AudioWiring | None:
        if PortSignal.AUDIO not in port.signals:
            return None
        return port.audio_wiring

    @staticmethod
    def shared_signals(from_port: Port, to_port: Port) -> list[PortSignal]:
        return [signal for signal in from_port.signals if signal in to_port.signals]

    @staticmethod
    def adapter_chain(first: PhysicalConnector, second: PhysicalConnector) -> list[str] | None:
        codes = ADAPTER_MATRIX.get(frozenset({first, second}))
        return list(codes) if codes else None

    def check(self, from_port: Port, to_port: Port) -> ConnectorCompatibility:
        from_physical = self.physical_connector(from_port)
        to_physical = self.physical_connector(to_port)

        if from_physical and to_physical:
            if from_physical == to_physical:
                return ConnectorCompatibility(compatible=True, resulting_connector=str(from_physical))

            adapter_codes = self.adapter_chain(from_physical, to_physical)
            if adapter_codes:
                return ConnectorCompatibility(
                    compatible=True,
                    resulting_connector=str(to_physical),
                    adapter_codes=adapter_codes,
                )

            if from_physical in PHONE_JACK_6_35 and to_physical in PHONE_JACK_6_35:
                return ConnectorCompatibility(compatible=True, resulting_connector=str(PhysicalConnector.TS_6_35))

        if from_port.connector == to_port.connector:
            return ConnectorCompatibility(compatible=True, resulting_connector=str(from_port.connector))

        combo_match = self._combo_jack_match(from_port.connector, to_port.connector)
        if combo_match:
            return ConnectorCompatibility(compatible=True, resulting_connector=str(combo_match))

        return ConnectorCompatibility(compatible=False)

    @staticmethod
    def _combo_jack_match(first: PortConnector, second: PortConnector) -> PhysicalConnector | None:
        if first == PortConnector.COMBO_XLR_TRS:
            return COMBO_JACK_MATCHES.get(second)
        if second == PortConnector.COMBO_XLR_TRS:
            return COMBO_JACK_MATCHES.get(first)
        return None
