"""
FastAPI dependency injection.
Service handles live on app.state, built per application in the lifespan,
so each app (and each test) gets its own store and upload directory.
"""
from fastapi import Depends, Request

from elara.core.config import Settings
from elara.services.metadata import MetadataService
from elara.services.plays import PlaysService
from elara.services.scanner import ScanService


def _state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise RuntimeError(f"{name} not initialized")
    return service


def get_settings(request: Request) -> Settings:
    return _state(request, "settings")


def get_metadata_service(request: Request) -> MetadataService:
    return _state(request, "metadata_service")


def get_scan_service(request: Request) -> ScanService:
    return _state(request, "scan_service")


def get_plays_service(request: Request) -> PlaysService:
    return _state(request, "plays_service")


SettingsDep = Depends(get_settings)
MetadataServiceDep = Depends(get_metadata_service)
ScanServiceDep = Depends(get_scan_service)
PlaysServiceDep = Depends(get_plays_service)
