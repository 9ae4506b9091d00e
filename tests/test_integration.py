"""Socket-level integration tests for the front controller."""

import socket
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from config import MAX_BODY_BYTES
from errors import MissingDirectory
from server import HTTPServer


def _start_server() -> tuple[HTTPServer, threading.Thread]:
    server = HTTPServer(port=0)
    thread = threading.Thread(target=server.start, daemon=True)
    thread.start()

    deadline = time.time() + 3
    while server.port == 0 and time.time() < deadline:
        time.sleep(0.01)

    if server.port == 0:
        raise RuntimeError("Server did not bind to a port")

    return server, thread


def _stop_server(server: HTTPServer, thread: threading.Thread) -> None:
    server.stop()
    thread.join(timeout=2.0)


def _send_raw(host: str, port: int, payload: bytes) -> bytes:
    with socket.create_connection((host, port), timeout=2.0) as client:
        client.sendall(payload)
        chunks = []
        while True:
            chunk = client.recv(8192)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


def test_home_page_served_through_router() -> None:
    server, thread = _start_server()
    try:
        response = _send_raw(server.host, server.port, b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
    finally:
        _stop_server(server, thread)

    assert response.startswith(b"HTTP/1.1 200 OK")
    assert b"Connection: close\r\n" in response
    assert b'<link href="http://localhost/stylesheets/main.css"' in response


def test_public_file_served_directly() -> None:
    server, thread = _start_server()
    try:
        response = _send_raw(
            server.host,
            server.port,
            b"GET /stylesheets/main.css HTTP/1.1\r\nHost: localhost\r\n\r\n",
        )
    finally:
        _stop_server(server, thread)

    expected_body = (Path(__file__).resolve().parent.parent / "public" / "stylesheets" / "main.css").read_bytes()
    assert response.startswith(b"HTTP/1.1 200 OK")
    assert b"Content-Type: text/css\r\n" in response
    assert response.endswith(expected_body)


def test_unknown_route_returns_404() -> None:
    server, thread = _start_server()
    try:
        response = _send_raw(server.host, server.port, b"GET /nowhere HTTP/1.1\r\nHost: localhost\r\n\r\n")
    finally:
        _stop_server(server, thread)

    assert response.startswith(b"HTTP/1.1 404 Not Found")


def test_contact_form_post_round_trip() -> None:
    server, thread = _start_server()
    body = b"contact_email=ann%40example.com&homepage_url=http%3A%2F%2Fann.example&message=%3Ci%3Ehello%3C%2Fi%3E"
    request = (
        b"POST /contact/submit HTTP/1.1\r\n"
        b"Host: localhost\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
        + f"Content-Length: {len(body)}\r\n".encode("ascii")
        + b"\r\n"
        + body
    )
    try:
        response = _send_raw(server.host, server.port, request)
    finally:
        _stop_server(server, thread)

    assert response.startswith(b"HTTP/1.1 200 OK")
    assert b"<dd>ann@example.com</dd>" in response
    assert b"<dd>http://ann.example</dd>" in response
    assert b"<dd>hello</dd>" in response


def test_head_request_has_no_body() -> None:
    server, thread = _start_server()
    try:
        response = _send_raw(server.host, server.port, b"HEAD / HTTP/1.1\r\nHost: localhost\r\n\r\n")
    finally:
        _stop_server(server, thread)

    head, body = response.split(b"\r\n\r\n", 1)
    assert head.startswith(b"HTTP/1.1 200 OK")
    assert b"Content-Length: 0" not in head
    assert body == b""


def test_sequential_clients_are_all_served() -> None:
    server, thread = _start_server()
    payload = b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n"
    try:
        with ThreadPoolExecutor(max_workers=5) as executor:
            futures = [executor.submit(_send_raw, server.host, server.port, payload) for _ in range(5)]
            responses = [future.result() for future in futures]
    finally:
        _stop_server(server, thread)

    assert all(response.startswith(b"HTTP/1.1 200 OK") for response in responses)


def test_protocol_errors() -> None:
    server, thread = _start_server()
    oversized = (
        b"POST /contact/submit HTTP/1.1\r\n"
        b"Host: localhost\r\n"
        + f"Content-Length: {MAX_BODY_BYTES + 1}\r\n".encode("ascii")
        + b"\r\n"
    )
    try:
        malformed = _send_raw(server.host, server.port, b"BROKEN\r\n\r\n")
        not_allowed = _send_raw(server.host, server.port, b"PUT / HTTP/1.1\r\nHost: localhost\r\n\r\n")
        too_large = _send_raw(server.host, server.port, oversized)
    finally:
        _stop_server(server, thread)

    assert malformed.startswith(b"HTTP/1.1 400 Bad Request")
    assert not_allowed.startswith(b"HTTP/1.1 405 Method Not Allowed")
    assert b"Allow: GET, HEAD, POST\r\n" in not_allowed
    assert too_large.startswith(b"HTTP/1.1 413 Payload Too Large")


def test_server_refuses_to_start_without_vital_directories(tmp_path: Path) -> None:
    (tmp_path / "stylesheets").mkdir()
    server = HTTPServer(port=0, public_root=tmp_path)

    with pytest.raises(MissingDirectory, match="public/javascripts"):
        server.start()
