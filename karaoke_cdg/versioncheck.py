"""Checking a plain-text version file over HTTP for a newer release.

The version file holds ``<name>:<value>`` lines. ``Signature`` (which must be
``CheckNewVersion1``) and ``Version`` are required; any other fields are passed
through. In values, ``\\n`` stands for a line feed and ``\\\\`` for a backslash.
"""

from __future__ import annotations

import enum
import re
import socket
from collections.abc import Callable
from urllib.parse import urlsplit

SIGNATURE = "CheckNewVersion1"
USER_AGENT = "New version checker"
BUFFER_SIZE = 8192

_LINE_RE = re.compile(r"(\w+)\s*:(.*)")
_STATUS_RE = re.compile(r"http/1.\d\s+2\d\d", re.IGNORECASE)
_CONTENT_LENGTH_RE = re.compile(r"content-length: (\d+)", re.IGNORECASE)
_FLOAT_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*", re.ASCII)


class Status(enum.IntEnum):
    """Progress of a version check."""

    RESOLVING = 0
    CONNECTING = 1
    SENDING_REQUEST = 2
    RECEIVING_RESPONSE = 3
    PROCEEDING = 4
    FINISHED = 5


class ErrorCode(enum.IntEnum):
    """Reasons a version check fails."""

    URL_INVALID = 0
    NAME_LOOKUP = 1
    SYSTEM = 2
    CONNECTING = 3
    SENDING = 4
    RECEIVING = 5
    HTTP_ERROR = 6
    INVALID_FORMAT = 7
    INVALID_SIGNATURE = 8


class VersionCheckError(Exception):
    """A version check failed; ``code`` tells why."""

    def __init__(self, code: ErrorCode, message: str = "") -> None:
        self.code = code
        super().__init__(message or code.name)


def _to_double(text: str) -> float:
    """Parse a number the lenient way: anything invalid counts as 0."""
    if not _FLOAT_RE.fullmatch(text):
        return 0.0
    return float(text)


def parse_version_file(data: bytes | str) -> dict[str, str]:
    """Parse and validate a version file; the Signature field is dropped.

    Raises VersionCheckError with INVALID_FORMAT for a malformed line and
    INVALID_SIGNATURE when Signature or Version is missing or wrong.
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
    text = text.replace("\r", "\n")

    content: dict[str, str] = {}
    for line in filter(None, text.split("\n")):
        match = _LINE_RE.fullmatch(line)
        if match is None:
            raise VersionCheckError(ErrorCode.INVALID_FORMAT, f"invalid line: {line!r}")
        value = match.group(2).strip().replace("\\n", "\n").replace("\\\\", "\\")
        content[match.group(1)] = value

    if content.get("Signature") != SIGNATURE or "Version" not in content:
        raise VersionCheckError(ErrorCode.INVALID_SIGNATURE)

    del content["Signature"]
    return content


def is_newer(info: dict[str, str], current_version: str | None) -> bool:
    """True if there is no current version or the file's Version is greater."""
    if not current_version:
        return True
    return _to_double(info.get("Version", "")) > _to_double(current_version)


class NewVersionChecker:
    """Fetches a version file over plain HTTP and reports a newer version."""

    TIMEOUT = 180.0

    def __init__(
        self,
        url: str,
        current_version: str | None = None,
        on_status: Callable[[Status], None] | None = None,
    ) -> None:
        self.url = url
        self.current_version = current_version
        self.on_status = on_status

    def _report(self, status: Status) -> None:
        if self.on_status is not None:
            self.on_status(status)

    def check(self) -> dict[str, str] | None:
        """Run the check; return the file's fields if it is newer, else None.

        Raises VersionCheckError on any failure.
        """
        try:
            parts = urlsplit(self.url)
            port = parts.port or 80
        except ValueError:
            raise VersionCheckError(ErrorCode.URL_INVALID) from None
        host = parts.hostname or ""
        if parts.scheme != "http" or not host:
            raise VersionCheckError(ErrorCode.URL_INVALID)

        address = self._resolve(host)

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError:
            raise VersionCheckError(ErrorCode.SYSTEM) from None

        with sock:
            sock.settimeout(self.TIMEOUT)
            self._report(Status.CONNECTING)
            try:
                sock.connect((address, port))
            except OSError:
                raise VersionCheckError(ErrorCode.CONNECTING) from None

            request = (
                f"GET {parts.path or '/'} HTTP/1.1\r\n"
                f"Host: {host}\r\n"
                f"User-Agent: {USER_AGENT}\r\nConnection: close\r\n\r\n"
            )
            self._report(Status.SENDING_REQUEST)
            try:
                sock.sendall(request.encode("utf-8"))
            except OSError:
                # Reported as a receive failure, as the checker always has.
                raise VersionCheckError(ErrorCode.RECEIVING) from None

            self._report(Status.RECEIVING_RESPONSE)
            body = self._receive(sock)

        self._report(Status.PROCEEDING)
        info = parse_version_file(body)
        result = info if is_newer(info, self.current_version) else None
        self._report(Status.FINISHED)
        return result

    def _resolve(self, host: str) -> str:
        try:
            socket.inet_aton(host)
            return host
        except OSError:
            pass
        self._report(Status.RESOLVING)
        try:
            return socket.gethostbyname(host)
        except OSError:
            raise VersionCheckError(ErrorCode.NAME_LOOKUP) from None

    @staticmethod
    def _read_line(sock: socket.socket, buffer: bytearray) -> str | None:
        """Pop one CRLF-terminated line; None if the connection closed first."""
        while True:
            end = buffer.find(b"\r\n")
            if end != -1:
                line = bytes(buffer[:end]).decode("utf-8", errors="replace")
                del buffer[: end + 2]
                return line
            if len(buffer) >= BUFFER_SIZE:
                return ""
            try:
                chunk = sock.recv(BUFFER_SIZE - len(buffer))
            except OSError:
                raise VersionCheckError(ErrorCode.RECEIVING) from None
            if not chunk:
                return None
            buffer += chunk

    def _receive(self, sock: socket.socket) -> bytes:
        buffer = bytearray()
        header: list[str] = []
        while True:
            line = self._read_line(sock, buffer)
            if line is None:
                raise VersionCheckError(ErrorCode.RECEIVING, "connection closed")
            if not line:
                break
            header.append(line)

        if not header or not _STATUS_RE.match(header[0]):
            raise VersionCheckError(
                ErrorCode.HTTP_ERROR, header[0] if header else "empty response"
            )

        content_length: int | None = None
        for line in header:
            match = _CONTENT_LENGTH_RE.fullmatch(line)
            if match:
                content_length = int(match.group(1))

        while content_length is None or len(buffer) < content_length:
            if len(buffer) >= BUFFER_SIZE:
                break
            try:
                chunk = sock.recv(BUFFER_SIZE - len(buffer))
            except OSError:
                raise VersionCheckError(ErrorCode.RECEIVING) from None
            if not chunk:
                break
            buffer += chunk

        if content_length is not None:
            del buffer[content_length:]
        return bytes(buffer)


def check_new_version(url: str, current_version: str | None = None) -> dict[str, str] | None:
    """Fetch the version file at ``url``; return its fields if it is newer."""
    return NewVersionChecker(url, current_version).check()


__all__ = [
    "ErrorCode",
    "NewVersionChecker",
    "Status",
    "VersionCheckError",
    "check_new_version",
    "is_newer",
    "parse_version_file",
]