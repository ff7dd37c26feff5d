from __future__ import annotations

import socket
import threading

import pytest

from client.core import connect_to_peer
from server.core import ChatListener
from shared.protocol import ConnectionUnavailable, MessageFramer


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def test_accept_gives_up_after_timeout():
    listener = ChatListener("127.0.0.1", 0, 0.05)
    try:
        with pytest.raises(ConnectionUnavailable) as excinfo:
            listener.accept()
        assert excinfo.value.message == "Time's over"
        assert excinfo.value.fatal
    finally:
        listener.close()


def test_listener_and_connector_link_up():
    listener = ChatListener("127.0.0.1", 0, 5.0)
    listener.start()
    host, port = listener.address
    accepted = {}

    def serve():
        accepted["connection"] = listener.accept()

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    try:
        with connect_to_peer(host, port) as outbound:
            thread.join(timeout=5)
            with accepted["connection"] as inbound:
                MessageFramer(outbound.source, outbound.sink).send_message(["ping"])
                assert MessageFramer(inbound.source, inbound.sink).receive_message().lines == ["ping"]
    finally:
        listener.close()


def test_refused_connection():
    with pytest.raises(ConnectionUnavailable) as excinfo:
        connect_to_peer("127.0.0.1", _free_port())
    assert excinfo.value.message.startswith("Couldn't create socket")


def test_bind_failure_is_reported():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
        taken.bind(("127.0.0.1", 0))
        taken.listen(1)
        listener = ChatListener("127.0.0.1", taken.getsockname()[1], 1.0)
        with pytest.raises(ConnectionUnavailable):
            listener.start()


def test_run_server_without_peer(scripted_console, tmp_path):
    from server.main import run_server
    from shared.settings import Settings

    console = scripted_console()
    settings = Settings(bind_host="127.0.0.1", port=0, accept_timeout=0.05, download_dir=tmp_path)
    assert run_server(settings, console=console) == 1
    assert console.output == ["Listening..."]
    assert console.errors == ["Time's over"]


def test_run_client_without_peer(scripted_console, tmp_path):
    from client.main import run_client
    from shared.settings import Settings

    console = scripted_console()
    settings = Settings(peer_host="127.0.0.1", port=_free_port(), download_dir=tmp_path)
    assert run_client(settings, console=console) == 1
    assert console.errors and console.errors[0].startswith("Couldn't create socket")
