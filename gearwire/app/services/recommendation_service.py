from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations

from gearwire.app.models.connection import Connection, ConnectionStatus, PortReference
from gearwire.app.models.device import Device, DeviceInstance
from gearwire.app.services.inference_service import InferenceService


class RecommendationService:
    def __init__(self, inference_service: InferenceService) -> None:
        self._inference_service = inference_service

    def recommend_between(self, device_a: Device, device_b: Device) -> list[str]:
        """Suggest cables for every output-to-input pairing in both directions.

        Falls back to the workflow summaries when no cable suggestion results,
        and returns an empty list when neither device can feed the other.
        """
        instance_a = DeviceInstance(instance_id=f"device-{device_a.id}", device=device_a)
        instance_b = DeviceInstance(instance_id=f"device-{device_b.id}", device=device_b)

        connections = [
            *self._pairings(instance_a, instance_b),
            *self._pairings(instance_b, instance_a),
        ]
        if not connections:
            return []

        inference = self._inference_service.infer([instance_a, instance_b], connections)

        recommendations: set[str] = set()
        for cable in inference.required_cables:
            from_ref, to_ref = cable.ports
            from_label = from_ref.device_name or from_ref.device_id
            to_label = to_ref.device_name or to_ref.device_id
            recommendations.add(f"{from_label} → {to_label}: Use {cable.description}")

        if not recommendations:
            recommendations.update(summary for summary in inference.summaries if summary)

        return sorted(recommendations)

    def recommend_for_instances(self, instances: Sequence[DeviceInstance]) -> list[str]:
        suggestions: set[str] = set()
        for first, second in combinations(instances, 2):
            suggestions.update(self.recommend_between(first.device, second.device))
        return sorted(suggestions)

    @staticmethod
    def _pairings(source: DeviceInstance, target: DeviceInstance) -> list[Connection]:
        connections: list[Connection] = []
        for from_port in source.device.ports:
            if not from_port.is_output:
                continue
            for to_port in target.device.ports:
                if not to_port.is_input:
                    continue
                connections.append(
                    Connection(
                        id=f"{source.instance_id}:{from_port.id}->{target.instance_id}:{to_port.id}",
                        source=PortReference(
                            instance_id=source.instance_id,
                            device_id=source.device.id,
                            port_id=from_port.id,
                            device_name=source.device.name,
                            port_label=from_port.label,
                        ),
                        destination=PortReference(
                            instance_id=target.instance_id,
                            device_id=target.device.id,
                            port_id=to_port.id,
                            device_name=target.device.name,
                            port_label=to_port.label,
                        ),
                        status=ConnectionStatus.PENDING,
                    )
                )
        return connections
