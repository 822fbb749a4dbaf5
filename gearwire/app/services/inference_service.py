from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from gearwire.app.models.connection import (
    CableSuggestion,
    Connection,
    ConnectionStatus,
    InferenceOptions,
    InferenceResult,
    PortReference,
)
from gearwire.app.models.device import Device, DeviceInstance
from gearwire.app.models.port import AudioWiring, Port, PortDirection, PortSignal
from gearwire.app.services.compatibility_service import (
    CompatibilityService,
    ConnectorCompatibility,
    describe_connector,
    describe_signal,
    format_adapter_chain,
    format_signals,
    join_labels,
)

logger = logging.getLogger(__name__)

BALANCED_MISMATCH_WARNING = (
    "Balanced/unbalanced audio mismatch: connection will work but becomes unbalanced "
    "(possible noise/level change)."
)
STEREO_MISMATCH_WARNING = "Stereo-to-mono audio mismatch: one channel may be lost, or the mono result may sound wrong."
MIXER_HINT_WARNING = (
    "Multiple MIDI-linked devices detected, but only one audio feed reaches monitors. "
    "Route additional outputs (e.g., into a mixer) so every device can be heard."
)
MISSING_CLOCK_MASTER_WARNING = "Set a clock master so your MIDI devices stay in sync."
MULTIPLE_CLOCK_MASTERS_WARNING = "Multiple MIDI clock masters selected. Choose only one master clock device."

MONO_WIRINGS = frozenset({AudioWiring.BALANCED_MONO, AudioWiring.UNBALANCED_MONO})


@dataclass(slots=True)
class NetworkRoles:
    monitors: set[str] = field(default_factory=set)
    audio_capable: set[str] = field(default_factory=set)
    midi_capable: set[str] = field(default_factory=set)
    # Insertion-ordered so unrouted devices are named in chain order.
    midi_chain: dict[str, None] = field(default_factory=dict)
    audio_linked: set[str] = field(default_factory=set)
    feeds_monitor: set[str] = field(default_factory=set)


@dataclass(slots=True)
class ConnectionFindings:
    blocking: list[str] = field(default_factory=list)
    advisory: list[str] = field(default_factory=list)
    cable: CableSuggestion | None = None
    summary: str | None = None

    @property
    def issues(self) -> list[str]:
        return [*self.blocking, *self.advisory]

    @property
    def status(self) -> ConnectionStatus:
        if self.blocking:
            return ConnectionStatus.INVALID
        if self.advisory:
            return ConnectionStatus.PENDING
        return ConnectionStatus.VALID


class WarningLog:
    """Insertion-ordered set of warning strings."""

    def __init__(self) -> None:
        self._items: dict[str, None] = {}

    def add(self, message: str) -> None:
        self._items.setdefault(message, None)

    def extend(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.add(message)

    def as_list(self) -> list[str]:
        return list(self._items)


class InferenceService:
    def __init__(self, compatibility_service: CompatibilityService) -> None:
        self._compatibility = compatibility_service

    def infer(
        self,
        instances: Iterable[DeviceInstance],
        connections: Iterable[Connection],
        options: InferenceOptions | None = None,
    ) -> InferenceResult:
        options = options or InferenceOptions()
        device_map: dict[str, Device] = {instance.instance_id: instance.device for instance in instances}
        roles = self._classify_instances(device_map)
        warnings = WarningLog()

        evaluated: list[Connection] = []
        required_cables: list[CableSuggestion] = []
        summaries: list[str] = []

        for connection in connections:
            findings = self._evaluate_connection(connection, device_map, roles)
            warnings.extend(findings.issues)
            if findings.cable:
                required_cables.append(findings.cable)
            if findings.summary:
                summaries.append(findings.summary)

            issues = findings.issues
            evaluated.append(
                connection.model_copy(
                    update={"status": findings.status, "issues": issues or None},
                    deep=True,
                )
            )

        self._check_audio_routing(roles, device_map, warnings)
        self._check_midi_clock(roles, device_map, options.clock_master_ids, warnings)

        logger.debug(
            "Evaluated %d connections across %d devices: %d cables, %d warnings",
            len(evaluated),
            len(device_map),
            len(required_cables),
            len(warnings.as_list()),
        )

        return InferenceResult(
            connections=evaluated,
            warnings=warnings.as_list(),
            required_cables=required_cables,
            summaries=summaries,
        )

    @staticmethod
    def _classify_instances(device_map: dict[str, Device]) -> NetworkRoles:
        roles = NetworkRoles()
        for instance_id, device in device_map.items():
            if device.is_monitor:
                roles.monitors.add(instance_id)
            if device.has_audio_output:
                roles.audio_capable.add(instance_id)
            if device.has_midi:
                roles.midi_capable.add(instance_id)
        return roles

    def _evaluate_connection(
        self,
        connection: Connection,
        device_map: dict[str, Device],
        roles: NetworkRoles,
    ) -> ConnectionFindings:
        findings = ConnectionFindings()
        source_device = device_map.get(connection.source.instance_id)
        destination_device = device_map.get(connection.destination.instance_id)

        if not source_device:
            findings.blocking.append("Source device is no longer available.")
        if not destination_device:
            findings.blocking.append("Destination device is no longer available.")

        from_port = source_device.find_port(connection.source.port_id) if source_device else None
        to_port = destination_device.find_port(connection.destination.port_id) if destination_device else None

        if not from_port:
            findings.blocking.append("Source port not found on device.")
        if not to_port:
            findings.blocking.append("Destination port not found on device.")

        if from_port and from_port.direction == PortDirection.IN:
            findings.blocking.append(f"{from_port.label} cannot send signals (input-only).")
        if to_port and to_port.direction == PortDirection.OUT:
            findings.blocking.append(f"{to_port.label} cannot receive signals (output-only).")

        if not from_port or not to_port:
            return findings

        from_domain = self._compatibility.port_domain(from_port)
        to_domain = self._compatibility.port_domain(to_port)
        if from_domain and to_domain and from_domain != to_domain:
            findings.blocking.append(
                f"{from_port.label} ({from_domain.upper()}) cannot connect to {to_port.label} ({to_domain.upper()})."
            )

        shared = self._compatibility.shared_signals(from_port, to_port)
        if not shared:
            findings.blocking.append(
                f"{from_port.label} ({format_signals(from_port.signals)}) does not share signals with "
                f"{to_port.label} ({format_signals(to_port.signals)})."
            )

        compatibility = self._compatibility.check(from_port, to_port)
        if not compatibility.compatible:
            findings.blocking.append(
                f"{from_port.label} ({describe_connector(from_port.connector)}) is not compatible with "
                f"{to_port.label} ({describe_connector(to_port.connector)})."
            )

        if findings.blocking:
            return findings

        findings.cable = self._build_cable(connection, from_port, shared, compatibility)
        if findings.cable.requires_adapter:
            findings.advisory.append(findings.cable.requires_adapter)
        findings.advisory.extend(self._wiring_advisories(from_port, to_port))
        findings.summary = self._summary(connection, source_device, destination_device, findings.cable)

        self._record_roles(connection, from_port, to_port, shared, roles)
        return findings

    @staticmethod
    def _build_cable(
        connection: Connection,
        from_port: Port,
        shared: list[PortSignal],
        compatibility: ConnectorCompatibility,
    ) -> CableSuggestion:
        connector = compatibility.resulting_connector or str(from_port.connector)
        if compatibility.needs_adapter:
            adapter_phrase = format_adapter_chain(compatibility.adapter_codes)
            return CableSuggestion(
                id=f"{connection.id}-cable",
                description=adapter_phrase,
                connector=connector,
                ports=(connection.source, connection.destination),
                requires_adapter=f"Use {adapter_phrase}",
                adapters=list(compatibility.adapter_codes),
            )

        signal_label = join_labels([describe_signal(signal) for signal in shared])
        return CableSuggestion(
            id=f"{connection.id}-cable",
            description=f"{signal_label} {describe_connector(connector)} cable",
            connector=connector,
            ports=(connection.source, connection.destination),
        )

    def _wiring_advisories(self, from_port: Port, to_port: Port) -> list[str]:
        from_wiring = self._compatibility.audio_wiring(from_port)
        to_wiring = self._compatibility.audio_wiring(to_port)
        if not from_wiring or not to_wiring:
            return []

        pair = {from_wiring, to_wiring}
        advisories: list[str] = []
        if pair == MONO_WIRINGS:
            advisories.append(BALANCED_MISMATCH_WARNING)
        if AudioWiring.UNBALANCED_STEREO in pair and pair & MONO_WIRINGS:
            advisories.append(STEREO_MISMATCH_WARNING)
        return advisories

    @staticmethod
    def _summary(
        connection: Connection,
        source_device: Device | None,
        destination_device: Device | None,
        cable: CableSuggestion,
    ) -> str:
        from_label = device_label(connection.source, source_device)
        to_label = device_label(connection.destination, destination_device)
        phrase = cable.description if cable.description.endswith(".") else f"{cable.description}."
        return f"{from_label} → {to_label}: Use {phrase}"

    @staticmethod
    def _record_roles(
        connection: Connection,
        from_port: Port,
        to_port: Port,
        shared: list[PortSignal],
        roles: NetworkRoles,
    ) -> None:
        source_id = connection.source.instance_id
        destination_id = connection.destination.instance_id

        if PortSignal.MIDI in shared:
            roles.midi_chain.setdefault(source_id, None)
            roles.midi_chain.setdefault(destination_id, None)

        if PortSignal.AUDIO in shared:
            if from_port.direction != PortDirection.IN:
                roles.audio_linked.add(source_id)
            if to_port.direction != PortDirection.IN:
                roles.audio_linked.add(destination_id)
            if destination_id in roles.monitors:
                roles.feeds_monitor.add(source_id)
            if source_id in roles.monitors:
                roles.feeds_monitor.add(destination_id)

    @staticmethod
    def _check_audio_routing(roles: NetworkRoles, device_map: dict[str, Device], warnings: WarningLog) -> None:
        if len(roles.midi_chain) < 2:
            return

        unrouted = [
            instance_id
            for instance_id in roles.midi_chain
            if instance_id in roles.audio_capable
            and instance_id not in roles.audio_linked
            and instance_id not in roles.monitors
        ]
        if not unrouted:
            return

        if roles.monitors and len(roles.feeds_monitor) <= 1 and len(roles.audio_capable) > 1:
            warnings.add(MIXER_HINT_WARNING)

        names = ", ".join(device_map[instance_id].name for instance_id in unrouted)
        warnings.add(
            f"Audio from {names} is not routed to any destination. "
            "Connect these devices to a mixer, audio interface, or monitors."
        )

    @staticmethod
    def _check_midi_clock(
        roles: NetworkRoles,
        device_map: dict[str, Device],
        clock_master_ids: set[str],
        warnings: WarningLog,
    ) -> None:
        for instance_id, device in device_map.items():
            if instance_id in roles.midi_capable and instance_id not in roles.midi_chain:
                warnings.add(f"{device.name} has MIDI ports but is not connected to the MIDI clock network.")

        if roles.midi_capable and not clock_master_ids:
            warnings.add(MISSING_CLOCK_MASTER_WARNING)
        if len(clock_master_ids) > 1:
            warnings.add(MULTIPLE_CLOCK_MASTERS_WARNING)

        for instance_id in sorted(clock_master_ids):
            device = device_map.get(instance_id)
            if not device:
                continue
            if instance_id not in roles.midi_capable:
                warnings.add(f"{device.name} is marked as clock master but has no MIDI clock outputs.")
            elif instance_id not in roles.midi_chain:
                warnings.add(f"{device.name} is the clock master but is not connected to any MIDI devices.")


def device_label(reference: PortReference, device: Device | None) -> str:
    if reference.device_name:
        return reference.device_name
    if device:
        return device.name
    return reference.device_id
