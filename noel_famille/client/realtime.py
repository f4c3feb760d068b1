"""Socket.IO binding between an event room and an :class:`EventPageLoader`."""

from __future__ import annotations

import logging
from typing import Any

import socketio

from noel_famille.client.loader import REALTIME_TABS
from noel_famille.client.loader import EventPageLoader

logger = logging.getLogger(__name__)

SOCKETIO_PATH = "api/socketio"


class RealtimeBinding:
    def __init__(
        self,
        loader: EventPageLoader,
        base_url: str | None = None,
        client: socketio.Client | None = None,
        socketio_path: str = SOCKETIO_PATH,
    ):
        self.loader = loader
        self.base_url = base_url or loader.api.base_url
        self.socketio_path = socketio_path
        self.client = client or socketio.Client(reconnection=True)
        self.client.on("connect", self._joined_room)
        self.client.on("disconnect", self._disconnected)
        for event in REALTIME_TABS:
            self.client.on(event, self._router(event))

    @property
    def room(self) -> str:
        return f"event:{self.loader.event_id}"

    def _router(self, event: str):
        def handler(payload: Any = None):
            self.loader.on_realtime_event(event, payload)

        return handler

    def connect(self) -> None:
        self.client.connect(
            self.base_url,
            auth={"token": self.loader.api.access_token},
            socketio_path=self.socketio_path,
        )

    def _joined_room(self) -> None:
        # Rooms are lost on reconnection, so join on every connect
        self.client.emit(
            "join-event",
            {"eventId": self.loader.event_id},
            callback=self._join_acknowledged,
        )

    def _join_acknowledged(self, result: Any = None) -> None:
        if isinstance(result, dict) and not result.get("ok"):
            logger.warning("Could not join %s: %s", self.room, result.get("error"))

    def _disconnected(self, *args: Any) -> None:
        logger.info("Realtime connection to %s lost", self.room)

    def close(self) -> None:
        if self.client.connected:
            self.client.emit("leave-event", {"eventId": self.loader.event_id})
            self.client.disconnect()
        self.loader.close()
