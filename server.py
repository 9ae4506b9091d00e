"""Front controller: serves public files and dispatches everything else to controllers."""

from __future__ import annotations

import argparse
import json
import logging
import socket
import time
from pathlib import Path

import config
from assets import check_vital_directories
from config import HOST, INTEGRITY_CHECKED_FILES, LOG_FORMAT, PORT, PUBLIC_ROOT, SOCKET_TIMEOUT_SECS
from controllers.contact import Contact
from controllers.errors import ERROR_ACTIONS, Errors, render_error_page
from controllers.home import Home
from error_handler import handle_exception
from integrity import modified_files
from request import HTTPRequest, HTTPRequestParseError
from response import REASON_PHRASES, HTTPResponse
from router import Router
from socket_handler import (
    HeaderTooLargeError,
    MalformedRequestError,
    PayloadTooLargeError,
    SocketTimeoutError,
    read_http_request,
    write_http_response,
)
from utils import get_content_type, resolve_within

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "HEAD", "POST")


def build_default_router() -> Router:
    router = Router({"Home": Home, "Contact": Contact, "Errors": Errors})
    router.add("", {"controller": "Home", "action": "index"})
    router.add("contact", {"controller": "Contact", "action": "index"})
    for action, status_code in ERROR_ACTIONS.items():
        router.add(str(status_code), {"controller": "Errors", "action": action})
    router.add("{controller}/{action}")
    return router


class HTTPServer:
    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        router: Router | None = None,
        *,
        public_root: Path = PUBLIC_ROOT,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.host = host
        self.port = port
        self.router = router or build_default_router()
        self.public_root = Path(public_root)
        self.log_format = log_format

        self._server_socket: socket.socket | None = None
        self._running = False

    def start(self) -> None:
        """Check the deployment layout, then serve connections one at a time."""
        check_vital_directories(public_root=self.public_root)

        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(128)
            server_socket.settimeout(0.2)
            self.port = server_socket.getsockname()[1]
            logger.info("listening host=%s port=%s public_root=%s", self.host, self.port, self.public_root)

            self._running = True
            while self._running:
                try:
                    client_socket, address = server_socket.accept()
                except socket.timeout:
                    continue
                except OSError:
                    break
                self._handle_client(client_socket, address)

    def stop(self) -> None:
        self._running = False
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket:
            client_socket.settimeout(SOCKET_TIMEOUT_SECS)
            started_at = time.perf_counter()
            method = "-"
            path = "-"
            bytes_in = 0

            try:
                raw_request = read_http_request(client_socket)
            except PayloadTooLargeError:
                response = HTTPResponse(status_code=413, body="Payload Too Large")
            except HeaderTooLargeError:
                response = HTTPResponse(status_code=431, body="Request Header Fields Too Large")
            except SocketTimeoutError:
                response = HTTPResponse(status_code=408, body="Request Timeout")
            except MalformedRequestError:
                response = HTTPResponse(status_code=400, body="Bad Request")
            except OSError:
                return
            else:
                if not raw_request:
                    return
                bytes_in = len(raw_request)
                try:
                    request = HTTPRequest.from_bytes(raw_request)
                except HTTPRequestParseError as exc:
                    response = HTTPResponse(
                        status_code=exc.status_code,
                        body=REASON_PHRASES.get(exc.status_code, "Bad Request"),
                    )
                else:
                    method = request.method
                    path = request.path
                    response = self.dispatch(request)

            response.headers["Connection"] = "close"
            try:
                bytes_sent = write_http_response(client_socket, response)
            except OSError as exc:
                logger.warning("write failed client=%s error=%s", address[0], exc.__class__.__name__)
                return

            self._log_request(
                address=address,
                method=method,
                path=path,
                status_code=response.status_code,
                bytes_in=bytes_in,
                bytes_out=bytes_sent,
                started_at=started_at,
            )

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        if request.method not in ALLOWED_METHODS:
            return HTTPResponse(
                status_code=405,
                headers={"Allow": ", ".join(ALLOWED_METHODS)},
                body="Method Not Allowed",
            )

        if request.method in {"GET", "HEAD"}:
            public_file = self._public_file(request.path)
            if public_file is not None:
                try:
                    response = HTTPResponse(
                        status_code=200,
                        headers={"Content-Type": get_content_type(public_file)},
                        body=public_file.read_bytes(),
                    )
                except OSError as exc:
                    status_code = 403 if isinstance(exc, PermissionError) else 404
                    logger.warning("Cannot read public file path=%s status=%s: %s", request.path, status_code, exc)
                    response = render_error_page(status_code)
                return self._as_head_response(response) if request.method == "HEAD" else response

        try:
            response = self.router.dispatch(request.path, request)
        except Exception as exc:
            response = handle_exception(exc)

        if request.method == "HEAD":
            return self._as_head_response(response)
        return response

    def _public_file(self, request_path: str) -> Path | None:
        if request_path.endswith("/"):
            return None
        candidate = resolve_within(request_path, self.public_root)
        if candidate is None or not candidate.is_file():
            return None
        return candidate

    def _as_head_response(self, get_response: HTTPResponse) -> HTTPResponse:
        return HTTPResponse(
            status_code=get_response.status_code,
            reason_phrase=get_response.reason_phrase,
            headers=dict(get_response.headers),
            body=b"",
            content_length_override=len(get_response.body),
        )

    def _log_request(
        self,
        *,
        address: tuple[str, int],
        method: str,
        path: str,
        status_code: int,
        bytes_in: int,
        bytes_out: int,
        started_at: float,
    ) -> None:
        duration_ms = (time.perf_counter() - started_at) * 1000
        event = {
            "client": address[0],
            "method": method,
            "path": path,
            "status": status_code,
            "bytes_in": bytes_in,
            "bytes_out": bytes_out,
            "latency_ms": round(duration_ms, 3),
        }
        if self.log_format == "json":
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            "client=%s method=%s path=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            event["client"],
            event["method"],
            event["path"],
            event["status"],
            event["bytes_in"],
            event["bytes_out"],
            duration_ms,
        )


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the MVC scaffold front controller")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    parser.add_argument(
        "--verify-integrity",
        action="store_true",
        help="compare installed files against hashes.json and exit",
    )
    parser.add_argument(
        "--show-errors",
        action="store_true",
        help="render exception details and tracebacks in error pages",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = _parse_args()
    logging.basicConfig(level=logging.INFO)
    if args.show_errors:
        config.SHOW_ERRORS = True
    if args.verify_integrity:
        changed = modified_files(INTEGRITY_CHECKED_FILES)
        for path in changed:
            logger.warning("modified: %s", path)
        raise SystemExit(1 if changed else 0)

    server = HTTPServer(host=args.host, port=args.port, log_format=args.log_format)
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()
