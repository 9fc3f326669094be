"""Connectivity signal.

``ConnectivityMonitor`` holds the current online state and notifies
subscribers on edge transitions only. ``HttpConnectivityMonitor`` refreshes
that state by probing an HTTP endpoint; there is no polling loop here, the
caller decides when to refresh.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List

import requests

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]


class ConnectivityMonitor:
    """Online/offline state with edge-triggered notifications."""

    def __init__(self, online: bool = True) -> None:
        self._online = online
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set_online(self, online: bool) -> None:
        with self._lock:
            changed = online != self._online
            self._online = online
            listeners = list(self._listeners)

        if not changed:
            return

        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in listeners:
            try:
                listener(online)
            except Exception:
                logger.exception("Connectivity listener failed")


class HttpConnectivityMonitor(ConnectivityMonitor):
    """Connectivity derived from reachability of an HTTP endpoint."""

    def __init__(self, probe_url: str, timeout: float = 3.0, online: bool = True) -> None:
        super().__init__(online=online)
        self.probe_url = probe_url
        self.timeout = timeout

    def refresh(self) -> bool:
        """Probe the endpoint and update the state. Any HTTP response counts as reachable."""
        try:
            requests.get(self.probe_url, timeout=self.timeout)
            reachable = True
        except requests.exceptions.RequestException as exc:
            logger.debug("Connectivity probe failed: %s", exc)
            reachable = False
        self.set_online(reachable)
        return reachable
