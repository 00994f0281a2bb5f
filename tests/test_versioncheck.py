import socket
import threading
from contextlib import contextmanager
from unittest import mock

import pytest

from karaoke_cdg.versioncheck import (
    ErrorCode,
    NewVersionChecker,
    Status,
    VersionCheckError,
    check_new_version,
    is_newer,
    parse_version_file,
)

EXAMPLE = (
    b"Signature:CheckNewVersion1\n"
    b"Version:1.12\n"
    b"URL: http://example.com/latestversion.zip\n"
    b"Changes: new functionality added.\\nA bar function added to package foo."
    b"\\n\\nZeta now works.\n"
)


@contextmanager
def serve(response):
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(1)
    received = []

    def run():
        conn, _ = srv.accept()
        with conn:
            data = b""
            while b"\r\n\r\n" not in data:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                data += chunk
            received.append(data)
            conn.sendall(response)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    try:
        yield srv.getsockname()[1], received
    finally:
        thread.join(5)
        srv.close()


def http_ok(body, extra=b""):
    return b"HTTP/1.1 200 OK\r\n" + extra + b"Connection: close\r\n\r\n" + body


def test_parse_documented_example():
    info = parse_version_file(EXAMPLE)
    assert info["Version"] == "1.12"
    assert info["URL"] == "http://example.com/latestversion.zip"
    assert info["Changes"] == (
        "new functionality added.\nA bar function added to package foo.\n\nZeta now works."
    )
    assert "Signature" not in info


def test_parse_handles_cr_line_endings_and_backslash():
    info = parse_version_file("Signature:CheckNewVersion1\r\nVersion:2\r\nPath:a\\\\b\r\n")
    assert info == {"Version": "2", "Path": "a\\b"}


def test_parse_invalid_line():
    with pytest.raises(VersionCheckError) as err:
        parse_version_file(b"Signature:CheckNewVersion1\nnot a field line\n")
    assert err.value.code == ErrorCode.INVALID_FORMAT


@pytest.mark.parametrize(
    "text",
    [
        "Version:1.0\n",
        "Signature:CheckNewVersion1\n",
        "Signature:Other\nVersion:1.0\n",
    ],
)
def test_parse_bad_signature(text):
    with pytest.raises(VersionCheckError) as err:
        parse_version_file(text)
    assert err.value.code == ErrorCode.INVALID_SIGNATURE


def test_is_newer():
    info = {"Version": "1.12"}
    assert is_newer(info, None) is True
    assert is_newer(info, "") is True
    assert is_newer(info, "1.10") is True
    assert is_newer(info, "1.12") is False
    assert is_newer(info, "2.0") is False
    assert is_newer(info, "garbage") is True
    assert is_newer({"Version": "garbage"}, "0.5") is False


@pytest.mark.parametrize("url", ["https://example.com/v.txt", "http:///v.txt", "not a url"])
def test_invalid_url(url):
    with pytest.raises(VersionCheckError) as err:
        NewVersionChecker(url).check()
    assert err.value.code == ErrorCode.URL_INVALID


def test_check_reports_newer_version_and_statuses():
    statuses = []
    with serve(http_ok(EXAMPLE)) as (port, received):
        checker = NewVersionChecker(
            f"http://127.0.0.1:{port}/latest.txt", "1.0", statuses.append
        )
        info = checker.check()
    assert info["Version"] == "1.12"
    assert received[0].startswith(b"GET /latest.txt HTTP/1.1\r\n")
    assert f"Host: 127.0.0.1\r\n".encode() in received[0]
    assert statuses == [
        Status.CONNECTING,
        Status.SENDING_REQUEST,
        Status.RECEIVING_RESPONSE,
        Status.PROCEEDING,
        Status.FINISHED,
    ]


def test_check_not_newer_returns_none_but_finishes():
    statuses = []
    with serve(http_ok(EXAMPLE)) as (port, _):
        result = NewVersionChecker(
            f"http://127.0.0.1:{port}/v.txt", "1.12", statuses.append
        ).check()
    assert result is None
    assert statuses[-1] == Status.FINISHED


def test_check_respects_content_length():
    body = b"Signature:CheckNewVersion1\nVersion:3.0\n"
    extra = f"Content-Length: {len(body)}\r\n".encode()
    with serve(http_ok(body + b"junk line\n", extra)) as (port, _):
        info = check_new_version(f"http://127.0.0.1:{port}/v.txt")
    assert info == {"Version": "3.0"}


def test_check_http_error():
    with serve(b"HTTP/1.1 404 Not Found\r\n\r\n") as (port, _):
        with pytest.raises(VersionCheckError) as err:
            check_new_version(f"http://127.0.0.1:{port}/v.txt")
    assert err.value.code == ErrorCode.HTTP_ERROR


def test_check_invalid_body():
    with serve(http_ok(b"Signature:Wrong\nVersion:1\n")) as (port, _):
        with pytest.raises(VersionCheckError) as err:
            check_new_version(f"http://127.0.0.1:{port}/v.txt")
    assert err.value.code == ErrorCode.INVALID_SIGNATURE


def test_connection_refused():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(VersionCheckError) as err:
        check_new_version(f"http://127.0.0.1:{port}/v.txt")
    assert err.value.code == ErrorCode.CONNECTING


@mock.patch("socket.gethostbyname", side_effect=socket.gaierror("no such host"))
def test_name_lookup_failure(_lookup):
    statuses = []
    checker = NewVersionChecker("http://updates.example.com/v.txt", None, statuses.append)
    with pytest.raises(VersionCheckError) as err:
        checker.check()
    assert err.value.code == ErrorCode.NAME_LOOKUP
    assert statuses == [Status.RESOLVING]