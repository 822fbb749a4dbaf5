from __future__ import annotations

from itertools import product

import pytest

from gearwire.app.models.port import (
    AudioWiring,
    PhysicalConnector,
    Port,
    PortConnector,
    PortDirection,
    PortDomain,
    PortSignal,
)
from gearwire.app.services.compatibility_service import (
    CompatibilityService,
    format_adapter_chain,
    format_signals,
)


def _port(
    port_id: str,
    connector: str,
    direction: str = "out",
    signals: list[str] | None = None,
    **extra: object,
) -> Port:
    return Port(
        id=port_id,
        direction=direction,
        connector=connector,
        signals=signals if signals is not None else ["audio"],
        **extra,
    )


def test_same_physical_family_connects_directly() -> None:
    service = CompatibilityService()

    result = service.check(_port("a", "trs_6.35mm"), _port("b", "6.35mm-trs", direction="in"))

    assert result.compatible
    assert result.adapter_codes == []
    assert result.resulting_connector == "6.35mm-trs"


def test_friendly_names_resolve_to_canonical_family() -> None:
    service = CompatibilityService()

    result = service.check(_port("a", "quarter-inch-TRS"), _port("b", "trs_6.35mm", direction="in"))

    assert result.compatible
    assert not result.needs_adapter
    assert service.physical_connector(_port("c", "eighth-inch-TRS")) == PhysicalConnector.TRS_3_5


def test_minijack_to_quarter_inch_needs_breakout_adapter() -> None:
    service = CompatibilityService()
    minijack = _port("phones", "eighth-inch-TRS")
    quarter_inch = _port("input", "quarter-inch-TRS", direction="in")

    forward = service.check(minijack, quarter_inch)
    reverse = service.check(quarter_inch, minijack)

    assert forward.adapter_codes == ["stereo-breakout-cable"]
    assert forward.resulting_connector == "6.35mm-trs"
    assert reverse.adapter_codes == ["stereo-breakout-cable"]
    assert reverse.resulting_connector == "3.5mm-trs"


def test_trs_midi_to_din_uses_midi_adapter() -> None:
    service = CompatibilityService()

    result = service.check(
        _port("midi-out", "trs-midi", signals=["midi"]),
        _port("midi-in", "din_5", direction="in", signals=["midi"]),
    )

    assert result.compatible
    assert result.adapter_codes == ["trs-midi-to-din5"]
    assert result.resulting_connector == "din5"
    assert format_adapter_chain(result.adapter_codes) == "TRS-A to DIN-5 MIDI cable"


@pytest.mark.parametrize(
    ("first", "second"),
    [("ts_6.35mm", "trs_6.35mm"), ("trs_6.35mm", "ts_6.35mm"), ("quarter-inch-TS", "6.35mm-trs")],
)
def test_ts_and_trs_quarter_inch_seat_without_adapter(first: str, second: str) -> None:
    result = CompatibilityService().check(_port("a", first), _port("b", second, direction="in"))

    assert result.compatible
    assert result.adapter_codes == []
    assert result.resulting_connector == "6.35mm-ts"


def test_combo_input_accepts_phone_jacks() -> None:
    service = CompatibilityService()
    combo = _port("input-1", "combo_xlr_trs", direction="in")

    with_trs = service.check(_port("out", "trs_6.35mm"), combo)
    with_ts = service.check(_port("out", "ts_6.35mm"), combo)

    assert with_trs.compatible and with_trs.resulting_connector == "6.35mm-trs"
    assert with_ts.compatible and with_ts.resulting_connector == "6.35mm-ts"
    assert not with_trs.needs_adapter
    assert not with_ts.needs_adapter


def test_usb_connectors_require_identical_codes() -> None:
    service = CompatibilityService()
    usb_b = _port("usb", "usb_b", direction="in_out", signals=["usb_midi"])
    usb_c = _port("usb", "usb_c", direction="in_out", signals=["usb_midi"])

    assert not service.check(usb_b, usb_c).compatible
    same = service.check(usb_b, usb_b)
    assert same.compatible
    assert same.resulting_connector == "usb_b"


def test_unrelated_families_are_incompatible() -> None:
    result = CompatibilityService().check(_port("a", "xlr"), _port("b", "din5", direction="in"))

    assert not result.compatible
    assert result.resulting_connector is None
    assert result.adapter_codes == []


def test_physical_override_wins_over_connector_code() -> None:
    port = _port("phones", "trs_3.5mm", physical_connector="quarter-inch-TS")

    assert port.physical_connector == PhysicalConnector.TS_6_35
    assert CompatibilityService.physical_connector(port) == PhysicalConnector.TS_6_35


def test_compatibility_verdict_is_symmetric_for_every_connector_pair() -> None:
    service = CompatibilityService()
    connectors = list(PortConnector)

    for first, second in product(connectors, repeat=2):
        forward = service.check(_port("a", first), _port("b", second))
        reverse = service.check(_port("b", second), _port("a", first))

        assert forward.compatible == reverse.compatible, (first, second)
        assert sorted(forward.adapter_codes) == sorted(reverse.adapter_codes), (first, second)


def test_domain_inference_prefers_audio() -> None:
    service = CompatibilityService()

    assert service.port_domain(_port("a", "usb_c", signals=["midi", "audio"])) == PortDomain.AUDIO
    assert service.port_domain(_port("b", "din_5", signals=["midi"])) == PortDomain.MIDI
    assert service.port_domain(_port("c", "cv_gate", signals=["cv"])) is None
    assert service.port_domain(_port("d", "din_5", signals=["audio"], domain="midi")) == PortDomain.MIDI


def test_audio_wiring_only_applies_to_audio_ports() -> None:
    service = CompatibilityService()

    audio = _port("a", "trs_6.35mm", audio_wiring="balanced_mono")
    midi = _port("b", "din_5", signals=["midi"], audio_wiring="balanced_mono")

    assert service.audio_wiring(audio) == AudioWiring.BALANCED_MONO
    assert service.audio_wiring(midi) is None


def test_signal_formatting() -> None:
    assert format_signals([]) == "no signals"
    assert format_signals([PortSignal.MIDI]) == "MIDI"
    assert format_signals([PortSignal.AUDIO, PortSignal.MIDI, PortSignal.SYNC]) == "audio, MIDI and clock"


def test_port_label_defaults_to_id() -> None:
    port = Port(id="midi-in", direction=PortDirection.IN, connector=PortConnector.DIN_5, signals=[PortSignal.MIDI])

    assert port.label == "midi-in"
    assert port.is_input and not port.is_output
