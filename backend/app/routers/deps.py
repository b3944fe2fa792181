"""Request-scoped access to the services built by the composition root."""
from __future__ import annotations

from fastapi import Request

from app.services.container import RankingServices


def get_services(request: Request) -> RankingServices:
    return request.app.state.services
