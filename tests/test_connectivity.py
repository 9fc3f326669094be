"""Connectivity monitor tests"""

from unittest.mock import MagicMock, patch

import requests

from maelstrom.offline_queue import ConnectivityMonitor, HttpConnectivityMonitor


def test_listeners_fire_only_on_transitions():
    monitor = ConnectivityMonitor(online=True)
    events = []
    monitor.subscribe(events.append)

    monitor.set_online(True)
    monitor.set_online(False)
    monitor.set_online(False)
    monitor.set_online(True)

    assert events == [False, True]


def test_unsubscribe_stops_notifications():
    monitor = ConnectivityMonitor(online=False)
    events = []
    unsubscribe = monitor.subscribe(events.append)

    unsubscribe()
    monitor.set_online(True)

    assert events == []
    unsubscribe()


def test_failing_listener_does_not_block_others():
    monitor = ConnectivityMonitor(online=False)
    events = []

    def broken(_online):
        raise RuntimeError("listener bug")

    monitor.subscribe(broken)
    monitor.subscribe(events.append)
    monitor.set_online(True)

    assert events == [True]
    assert monitor.is_online() is True


@patch("maelstrom.offline_queue.connectivity.requests.get")
def test_http_check_success_marks_online(mock_get):
    mock_get.return_value = MagicMock(status_code=503)
    monitor = HttpConnectivityMonitor("http://api.test/api/health", timeout=1.0, online=False)

    assert monitor.refresh() is True
    assert monitor.is_online() is True
    mock_get.assert_called_once_with("http://api.test/api/health", timeout=1.0)


@patch("maelstrom.offline_queue.connectivity.requests.get")
def test_http_check_failure_marks_offline(mock_get):
    mock_get.side_effect = requests.exceptions.ConnectionError("unreachable")
    monitor = HttpConnectivityMonitor("http://api.test/api/health")
    events = []
    monitor.subscribe(events.append)

    assert monitor.refresh() is False
    assert monitor.is_online() is False
    assert events == [False]
