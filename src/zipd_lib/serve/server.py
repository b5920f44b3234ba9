# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import json
from collections.abc import Callable
from datetime import timedelta
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from zipd_lib.core.error import IdentifierError, RequestError
from zipd_lib.core.logger import get_logger
from zipd_lib.properties.member import parse_members
from zipd_lib.submit.orchestrator import Orchestrator
from zipd_lib.sweep.sweeper import Sweeper

logger = get_logger(__name__, show_time=True)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class ZipdRequestHandler(BaseHTTPRequestHandler):
    """
    Serves the archive request and on-demand cleaning endpoints.

    - `POST /zip` accepts `{"filenames": [{"name", "ext", "alias"}, ...]}` and
      responds with `{"file_id": "<id>"}` before the archive is built.
    - `GET|POST /clean-old` sweeps the output root and responds with `{"status": "ok"}`.
    """

    server: "ZipdServer"

    def do_GET(self):
        self._dispatch("GET")

    def do_POST(self):
        self._dispatch("POST")

    def do_PUT(self):
        self._dispatch("PUT")

    def do_DELETE(self):
        self._dispatch("DELETE")

    def do_PATCH(self):
        self._dispatch("PATCH")

    def do_HEAD(self):
        self._dispatch("HEAD")

    def _dispatch(self, method: str) -> None:
        """Route the request to the handler registered for its path and method."""
        path = urlparse(self.path).path.rstrip("/")
        routes: dict[str, dict[str, Callable[[], None]]] = {
            "/zip": {"POST": self._handleZip},
            "/clean-old": {"GET": self._handleCleanOld, "POST": self._handleCleanOld},
        }

        if (methods := routes.get(path)) is None:
            self._sendError(HTTPStatus.NOT_FOUND, "Not Found")
            return

        if (handler := methods.get(method)) is None:
            self._sendError(HTTPStatus.METHOD_NOT_ALLOWED, "Method not allowed")
            return

        try:
            handler()
        except Exception as e:
            logger.critical(e, exc_info=True, stack_info=True)
            self._sendError(HTTPStatus.INTERNAL_SERVER_ERROR, str(e))

    def _handleZip(self) -> None:
        """Accept an archive request."""
        try:
            members = parse_members(self._readJson())
        except RequestError as e:
            logger.error(e)
            self._sendError(HTTPStatus.BAD_REQUEST, str(e))
            return

        try:
            job_id = self.server.orchestrator.submit(members)
        except IdentifierError as e:
            logger.error(e)
            self._sendError(HTTPStatus.INTERNAL_SERVER_ERROR, str(e))
            return

        self._sendJson({"file_id": job_id})

    def _handleCleanOld(self) -> None:
        """Sweep the output root synchronously."""
        self.server.sweeper.sweep()
        self._sendJson({"status": "ok"})

    def _readJson(self) -> Any:
        """
        Read and decode the JSON body of the request.

        Raises:
            RequestError: If the body is too large or not valid JSON.
        """
        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            length = -1

        if length < 0:
            raise RequestError("Invalid Content-Length header.")

        if length > self.server.max_request_bytes:
            raise RequestError(
                f"Request body exceeds {self.server.max_request_bytes} bytes."
            )

        body = self.rfile.read(length) if length > 0 else b""
        try:
            return json.loads(body or b"{}")
        except ValueError as e:
            raise RequestError(f"Invalid JSON body: {e}.") from e

    def _sendJson(self, payload: dict[str, Any]) -> None:
        data = json.dumps(payload).encode()
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", JSON_CONTENT_TYPE)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(data)

    def _sendError(self, status: HTTPStatus, message: str) -> None:
        data = json.dumps({"error": message}).encode()
        self.send_response(status)
        self.send_header("Content-Type", JSON_CONTENT_TYPE)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(data)

    def log_message(self, format: str, *args: Any) -> None:
        logger.info(f"{self.address_string()} {format % args}")


class ZipdServer(ThreadingHTTPServer):
    """
    HTTP front end of zipd.

    Each connection is handled on its own thread. Archive work is handed
    to the orchestrator and never blocks the handler.
    """

    allow_reuse_address = True
    daemon_threads = True

    def __init__(
        self,
        server_address: tuple[str, int],
        orchestrator: Orchestrator,
        output_root: Path,
        max_age: timedelta,
        max_request_bytes: int,
    ):
        """
        Initialize the ZipdServer.

        Args:
            server_address (tuple[str, int]): Host and port to bind to.
            orchestrator (Orchestrator): Orchestrator receiving archive requests.
            output_root (Path): Directory swept on `/clean-old`.
            max_age (timedelta): Retention window used on `/clean-old`.
            max_request_bytes (int): Largest accepted request body.
        """
        self.orchestrator = orchestrator
        self.sweeper = Sweeper(output_root, max_age)
        self.max_request_bytes = max_request_bytes

        super().__init__(server_address, ZipdRequestHandler)
