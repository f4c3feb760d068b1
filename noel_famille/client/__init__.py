"""Python client for the Noël en Famille API and its event-page cache."""

from noel_famille.client.api import ApiClient
from noel_famille.client.api import ApiError
from noel_famille.client.loader import EventPageLoader
from noel_famille.client.loader import TabState
from noel_famille.client.realtime import RealtimeBinding

__all__ = ["ApiClient", "ApiError", "EventPageLoader", "RealtimeBinding", "TabState"]
