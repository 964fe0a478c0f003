# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

import ipaddress
import socket
import ssl
import struct
import threading
import time
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from directprobe.config import ProbeSettings

TEST_CERT_SERIAL = 0x1234ABCD


class ScriptedServer:
    """Single-connection loopback server that replies with a canned response."""

    def __init__(
        self,
        response: bytes,
        *,
        tls_context: ssl.SSLContext | None = None,
        read_once: bool = False,
        close_after_send: bool = False,
        reset_after_send: bool = False,
        tail: bytes = b"",
        tail_delay: float = 0.0,
    ):
        self.response = response
        self.tls_context = tls_context
        self.read_once = read_once
        self.close_after_send = close_after_send
        self.reset_after_send = reset_after_send
        self.tail = tail
        self.tail_delay = tail_delay
        self.received = b""
        self.handshake_error: BaseException | None = None
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(1)
        self._listener.settimeout(5)
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "ScriptedServer":
        self._thread.start()
        return self

    def stop(self) -> None:
        self._listener.close()
        self._thread.join(5)

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        conn.settimeout(5)
        if self.tls_context is not None:
            try:
                conn = self.tls_context.wrap_socket(conn, server_side=True)
            except OSError as exc:
                self.handshake_error = exc
                conn.close()
                return
        try:
            self._exchange(conn)
        finally:
            conn.close()

    def _exchange(self, conn: socket.socket) -> None:
        data = bytearray()
        while b"\r\n\r\n" not in data:
            try:
                chunk = conn.recv(65536)
            except OSError:
                break
            if not chunk:
                break
            data.extend(chunk)
            if self.read_once:
                break
        self.received = bytes(data)

        try:
            if self.response:
                conn.sendall(self.response)
            if self.tail:
                time.sleep(self.tail_delay)
                conn.sendall(self.tail)
        except OSError:
            return
        if self.reset_after_send:
            # Zero linger turns the close into an RST.
            conn.setsockopt(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 1, 0))
            return
        if self.close_after_send:
            return
        # Hold the connection open until the client hangs up.
        while True:
            try:
                if not conn.recv(65536):
                    return
            except OSError:
                return


@pytest.fixture
def serve():
    servers: list[ScriptedServer] = []

    def _start(response: bytes, **kwargs) -> ScriptedServer:
        server = ScriptedServer(response, **kwargs).start()
        servers.append(server)
        return server

    yield _start
    for server in servers:
        server.stop()


@pytest.fixture
def closed_port() -> int:
    """A loopback port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture(scope="session")
def self_signed_cert():
    """Return (certificate, private_key) for a throwaway self-signed server certificate."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name(
        [
            x509.NameAttribute(NameOID.COMMON_NAME, "probe.test"),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "directprobe tests"),
        ]
    )
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(TEST_CERT_SERIAL)
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(
            x509.SubjectAlternativeName(
                [x509.DNSName("probe.test"), x509.IPAddress(ipaddress.ip_address("127.0.0.1"))]
            ),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    return cert, key


@pytest.fixture
def tls_server_context(self_signed_cert, tmp_path) -> ssl.SSLContext:
    cert, key = self_signed_cert
    cert_path = tmp_path / "server.pem"
    key_path = tmp_path / "server.key"
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.load_cert_chain(cert_path, key_path)
    return context


@pytest.fixture
def fast_settings() -> ProbeSettings:
    return ProbeSettings(connect_timeout=2.0, io_timeout=2.0)
