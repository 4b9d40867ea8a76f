"""FastAPI dependency injection helpers.

The app factory owns every stateful component and parks it on
``app.state``; these helpers hand them to routes.
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from signal_relay.infrastructure.memory.call_store import CallStore
from signal_relay.infrastructure.memory.presence_registry import PresenceRegistry
from signal_relay.infrastructure.ws.manager import ConnectionManager
from signal_relay.services.signaling_service import SignalingRouter


def get_call_store(conn: HTTPConnection) -> CallStore:
    return conn.app.state.call_store


def get_presence(conn: HTTPConnection) -> PresenceRegistry:
    return conn.app.state.presence


def get_manager(conn: HTTPConnection) -> ConnectionManager:
    return conn.app.state.manager


def get_signaling(conn: HTTPConnection) -> SignalingRouter:
    return conn.app.state.signaling


CallStoreDep = Annotated[CallStore, Depends(get_call_store)]
PresenceDep = Annotated[PresenceRegistry, Depends(get_presence)]
ManagerDep = Annotated[ConnectionManager, Depends(get_manager)]
SignalingDep = Annotated[SignalingRouter, Depends(get_signaling)]
