from __future__ import annotations

from dataclasses import dataclass

from gearwire.app.core.config import Settings
from gearwire.app.services.catalog_service import CatalogService
from gearwire.app.services.compatibility_service import CompatibilityService
from gearwire.app.services.inference_service import InferenceService
from gearwire.app.services.recommendation_service import RecommendationService
from gearwire.app.services.routing_service import AudioRoutingService
from gearwire.app.services.workspace_service import WorkspaceService


@dataclass(slots=True)
class AppContainer:
    settings: Settings
    catalog_service: CatalogService
    compatibility_service: CompatibilityService
    inference_service: InferenceService
    recommendation_service: RecommendationService
    routing_service: AudioRoutingService
    workspace_service: WorkspaceService
