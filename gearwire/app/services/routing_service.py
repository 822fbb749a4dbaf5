from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from gearwire.app.models.connection import Connection, ConnectionStatus
from gearwire.app.models.device import Device, DeviceInstance
from gearwire.app.models.port import AUDIO_SIGNALS


@dataclass(slots=True)
class AudioEdge:
    neighbor: str
    connection_id: str


@dataclass(slots=True)
class AudioGraph:
    """Directed audio adjacency between instances, rebuilt from each evaluation."""

    devices: dict[str, Device]
    adjacency: dict[str, list[AudioEdge]] = field(default_factory=dict)

    @property
    def monitors(self) -> set[str]:
        return {instance_id for instance_id, device in self.devices.items() if device.is_monitor}

    def neighbors(self, instance_id: str) -> list[AudioEdge]:
        return self.adjacency.get(instance_id, [])


@dataclass(slots=True)
class AudioPath:
    devices: list[str] = field(default_factory=list)
    connections: list[str] = field(default_factory=list)


class AudioRoutingService:
    def build_graph(self, instances: Iterable[DeviceInstance], connections: Iterable[Connection]) -> AudioGraph:
        devices = {instance.instance_id: instance.device for instance in instances}
        adjacency: dict[str, list[AudioEdge]] = defaultdict(list)

        for connection in connections:
            if connection.status == ConnectionStatus.INVALID:
                continue

            source_device = devices.get(connection.source.instance_id)
            destination_device = devices.get(connection.destination.instance_id)
            if not source_device or not destination_device:
                continue

            from_port = source_device.find_port(connection.source.port_id)
            to_port = destination_device.find_port(connection.destination.port_id)
            if not from_port or not to_port:
                continue

            shared_audio = AUDIO_SIGNALS.intersection(from_port.signals).intersection(to_port.signals)
            if not shared_audio:
                continue

            if from_port.is_output and to_port.is_input:
                adjacency[connection.source.instance_id].append(
                    AudioEdge(neighbor=connection.destination.instance_id, connection_id=connection.id)
                )
            if to_port.is_output and from_port.is_input:
                adjacency[connection.destination.instance_id].append(
                    AudioEdge(neighbor=connection.source.instance_id, connection_id=connection.id)
                )

        return AudioGraph(devices=devices, adjacency=dict(adjacency))

    def can_play_test_sound(self, graph: AudioGraph, instance_id: str) -> bool:
        device = graph.devices.get(instance_id)
        if not device or not device.supports_test_tone:
            return False

        monitors = graph.monitors
        if not monitors or instance_id in monitors:
            return False

        visited = {instance_id}
        queue = deque([instance_id])
        while queue:
            current = queue.popleft()
            if current != instance_id and current in monitors:
                return True
            for edge in graph.neighbors(current):
                if edge.neighbor not in visited:
                    visited.add(edge.neighbor)
                    queue.append(edge.neighbor)
        return False

    def downstream(self, graph: AudioGraph, instance_id: str) -> AudioPath:
        path = AudioPath(devices=[instance_id])
        visited = {instance_id}
        traversed: set[str] = set()
        queue = deque([instance_id])

        while queue:
            current = queue.popleft()
            for edge in graph.neighbors(current):
                if edge.connection_id not in traversed:
                    traversed.add(edge.connection_id)
                    path.connections.append(edge.connection_id)
                if edge.neighbor not in visited:
                    visited.add(edge.neighbor)
                    path.devices.append(edge.neighbor)
                    queue.append(edge.neighbor)
        return path
