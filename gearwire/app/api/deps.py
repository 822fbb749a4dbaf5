from __future__ import annotations

from fastapi import Depends, Request

from gearwire.app.core.container import AppContainer
from gearwire.app.services.workspace_service import WorkspaceService


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_workspace_service(container: AppContainer = Depends(get_container)) -> WorkspaceService:
    return container.workspace_service
