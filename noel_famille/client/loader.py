"""Lazy, per-tab cache of an event page.

The page opens with the event metadata, its counts and its participants.
Each tab is fetched the first time it is shown, and a mutation or a
realtime hint only refetches the tab being looked at. Other tabs are
marked invalidated and fetched again when shown. Counts are refreshed
through ``/minimal`` with a short debounce so a burst of hints costs one
request.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any
from typing import Callable

from noel_famille.client.api import ApiClient
from noel_famille.client.api import ApiError

logger = logging.getLogger(__name__)

COUNTS_DEBOUNCE_SECONDS = 0.3
CHAT_PAGE_SIZE = 50

TABS = ("contributions", "menu", "polls", "tasks", "chat")

# tab -> (path under /api/events/<id>, key of the list in the response)
SECTION_ENDPOINTS = {
    "contributions": ("contributions", "contributions"),
    "menu": ("menu", "menuRecipes"),
    "polls": ("polls", "polls"),
    "tasks": ("tasks", "tasks"),
    "chat": (f"messages?limit={CHAT_PAGE_SIZE}", "messages"),
}

# Event metadata merged by a counts refresh; loaded sections are kept
METADATA_FIELDS = (
    "name",
    "description",
    "date",
    "endDate",
    "location",
    "mapUrl",
    "status",
    "bannerImage",
)

REALTIME_TABS = {
    "contribution-update": "contributions",
    "poll-update": "polls",
    "task-update": "tasks",
    "new-message": "chat",
}

# Resource touched by a local mutation -> tabs holding it
MUTATION_TABS = {
    "contribution": ("contributions",),
    "menu": ("menu",),
    "ingredient-claim": ("menu", "contributions"),
    "poll": ("polls",),
    "task": ("tasks",),
    "message": ("chat",),
}


class TabState(enum.Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    INVALIDATED = "invalidated"


class EventPageLoader:
    def __init__(
        self,
        api: ApiClient,
        event_id: int,
        *,
        active_tab: str = "contributions",
        debounce: float = COUNTS_DEBOUNCE_SECONDS,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ):
        self.api = api
        self.event_id = event_id
        self.active_tab = active_tab
        self.debounce = debounce
        self._timer_factory = timer_factory
        self._counts_timer = None
        self._lock = threading.RLock()
        # Invalidated while their load was in flight
        self._stale: set[str] = set()
        self.event: dict | None = None
        self.participants: list[dict] = []
        self.sections: dict[str, list] = {tab: [] for tab in TABS}
        self.states: dict[str, TabState] = dict.fromkeys(TABS, TabState.UNLOADED)

    def _event_path(self, suffix: str = "") -> str:
        path = f"/api/events/{self.event_id}"
        return f"{path}/{suffix}" if suffix else path

    def load(self) -> dict:
        """Initial page load; every tab starts unloaded."""
        minimal = self.api.get(self._event_path("minimal"))
        try:
            participants = self.api.get(self._event_path("participants"))["participants"]
        except ApiError:
            logger.warning("Participants of event %s unavailable", self.event_id)
            participants = []
        with self._lock:
            self.event = minimal["event"]
            self.participants = participants
            self.sections = {tab: [] for tab in TABS}
            self.states = dict.fromkeys(TABS, TabState.UNLOADED)
            self._stale.clear()
        return self.event

    def load_tab(self, tab: str, *, force: bool = False) -> bool:
        """Fetch ``tab`` unless it is loaded (and not forced) or already loading.

        Returns whether a fetch completed.
        """
        with self._lock:
            previous = self.states[tab]
            if previous is TabState.LOADING:
                return False
            if previous is TabState.LOADED and not force:
                return False
            self.states[tab] = TabState.LOADING
            self._stale.discard(tab)

        suffix, key = SECTION_ENDPOINTS[tab]
        try:
            data = self.api.get(self._event_path(suffix))
        except ApiError as exc:
            logger.warning("Loading %s of event %s failed: %s", tab, self.event_id, exc)
            with self._lock:
                self.states[tab] = previous
            return False

        with self._lock:
            self.sections[tab] = data.get(key, [])
            stale = tab in self._stale
            if stale:
                self._stale.discard(tab)
                self.states[tab] = TabState.INVALIDATED
            else:
                self.states[tab] = TabState.LOADED
        if stale and tab == self.active_tab:
            # The visible tab changed while in flight: fetch it once more
            return self.load_tab(tab, force=True)
        return True

    def show_tab(self, tab: str) -> bool:
        self.active_tab = tab
        return self.load_tab(tab)

    def invalidate_tab(self, tab: str) -> None:
        with self._lock:
            state = self.states[tab]
            if state is TabState.LOADED:
                self.states[tab] = TabState.INVALIDATED
            elif state is TabState.LOADING:
                self._stale.add(tab)

    def refresh_active_tab(self, tab: str | None = None) -> bool:
        tab = tab or self.active_tab
        self.invalidate_tab(tab)
        loaded = self.load_tab(tab, force=True)
        self.schedule_counts_refresh()
        return loaded

    def schedule_counts_refresh(self) -> None:
        with self._lock:
            if self._counts_timer is not None:
                self._counts_timer.cancel()
            timer = self._timer_factory(self.debounce, self.refresh_counts)
            timer.daemon = True
            self._counts_timer = timer
        timer.start()

    def refresh_counts(self) -> None:
        try:
            data = self.api.get(self._event_path("minimal"))
        except ApiError as exc:
            logger.debug("Counts refresh of event %s skipped: %s", self.event_id, exc)
            return
        fresh = data.get("event") or {}
        counts = fresh.get("counts")
        if counts is None:
            return
        with self._lock:
            if self.event is None:
                return
            for field in METADATA_FIELDS:
                if fresh.get(field) is not None:
                    self.event[field] = fresh[field]
            self.event["counts"] = counts

    def _touch(self, tabs) -> None:
        for tab in tabs:
            if tab == self.active_tab:
                self.refresh_active_tab(tab)
            else:
                self.invalidate_tab(tab)
                self.schedule_counts_refresh()

    def on_mutation(self, resource: str) -> None:
        """Called after this client changed ``resource`` through the API."""
        self._touch(MUTATION_TABS[resource])

    def on_realtime_event(self, event: str, payload: Any = None) -> None:
        tab = REALTIME_TABS.get(event)
        if tab is None:
            return
        logger.debug("Realtime %s for event %s: %s", event, self.event_id, payload)
        self._touch((tab,))

    def close(self) -> None:
        with self._lock:
            if self._counts_timer is not None:
                self._counts_timer.cancel()
                self._counts_timer = None
