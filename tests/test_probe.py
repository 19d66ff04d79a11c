import socket
import ssl
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from phishcheck.config import Config
from phishcheck.models import CertificateProbeResult, ProbeStatus, RuleID
from phishcheck.probe import CERT_FAILURE_TEXT, CertificateProber, format_not_after, probe_outcome

NOT_AFTER = datetime(2030, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

@pytest.fixture(scope="module")
def self_signed(tmp_path_factory):
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "phish.test")])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(datetime(2020, 1, 1, tzinfo=timezone.utc))
        .not_valid_after(NOT_AFTER)
        .sign(key, hashes.SHA256())
    )
    directory = tmp_path_factory.mktemp("tls")
    cert_path = directory / "cert.pem"
    key_path = directory / "key.pem"
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ))
    return str(cert_path), str(key_path)

@contextmanager
def local_server(handler):
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    listener.settimeout(5)

    def serve():
        try:
            conn, _ = listener.accept()
        except OSError:
            return
        with conn:
            try:
                handler(conn)
            except OSError:
                pass

    t = threading.Thread(target=serve, daemon=True)
    t.start()
    try:
        yield listener.getsockname()[1]
    finally:
        listener.close()
        t.join(5)

def test_valid_certificate_expiry(self_signed):
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ctx.load_cert_chain(*self_signed)

    def handshake(conn):
        with ctx.wrap_socket(conn, server_side=True) as tls:
            tls.recv(1)

    with local_server(handshake) as port:
        result = CertificateProber(timeout=5, port=port).probe("127.0.0.1")

    assert result.status is ProbeStatus.VALID
    assert result.not_after == "Jan  2 03:04:05 2030 GMT"

def test_non_tls_server_is_invalid():
    def speak_http(conn):
        conn.settimeout(0.3)
        try:
            while conn.recv(65536):
                pass
        except socket.timeout:
            pass
        conn.sendall(b"HTTP/1.1 400 Bad Request\r\nContent-Length: 0\r\n\r\n")
        conn.shutdown(socket.SHUT_WR)
        time.sleep(0.2)

    with local_server(speak_http) as port:
        result = CertificateProber(timeout=5, port=port).probe("127.0.0.1")

    assert result.status is ProbeStatus.INVALID

def test_refused_connection_is_unreachable():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()

    result = CertificateProber(timeout=5, port=port).probe("127.0.0.1")
    assert result.status is ProbeStatus.UNREACHABLE

def test_silent_server_times_out():
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    try:
        prober = CertificateProber(timeout=0.5, port=listener.getsockname()[1])
        start = time.monotonic()
        result = prober.probe("127.0.0.1")
        elapsed = time.monotonic() - start
    finally:
        listener.close()

    assert result.status is ProbeStatus.UNREACHABLE
    assert elapsed < 3

def test_hanging_resolution_is_cut_at_deadline(monkeypatch):
    release = threading.Event()

    def never_connects(address, timeout=None, *args, **kwargs):
        release.wait(10)
        raise OSError("gave up")

    monkeypatch.setattr("phishcheck.probe.socket.create_connection", never_connects)
    try:
        start = time.monotonic()
        result = CertificateProber(timeout=0.3).probe("slow.example")
        elapsed = time.monotonic() - start
    finally:
        release.set()

    assert result.status is ProbeStatus.UNREACHABLE
    assert "timed out" in result.detail
    assert elapsed < 2

def test_empty_host_is_invalid():
    assert CertificateProber().probe("").status is ProbeStatus.INVALID

def test_host_with_port_suffix_is_not_reachable():
    result = CertificateProber(timeout=2).probe("localhost:notaport")
    assert result.status is ProbeStatus.UNREACHABLE

def test_rejects_non_positive_timeout():
    with pytest.raises(ValueError):
        CertificateProber(timeout=0)

def test_from_config(isolated_env):
    config = Config(environ={"PHISHCHECK_TIMEOUT": "2.5", "PHISHCHECK_PORT": "8443"})
    prober = CertificateProber.from_config(config)
    assert prober.timeout == 2.5
    assert prober.port == 8443

def test_format_not_after_pads_day():
    assert format_not_after(datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)) == "Mar  1 12:00:00 2026 GMT"
    assert format_not_after(datetime(2026, 11, 21, 8, 5, 9, tzinfo=timezone.utc)) == "Nov 21 08:05:09 2026 GMT"

def test_probe_outcome_valid_is_a_note():
    findings, notes = probe_outcome(CertificateProbeResult.valid("Jan  2 03:04:05 2030 GMT"))
    assert findings == []
    assert [n.text for n in notes] == ["SSL valid until: Jan  2 03:04:05 2030 GMT"]

@pytest.mark.parametrize("result", [
    CertificateProbeResult.unreachable("refused"),
    CertificateProbeResult.invalid("bad cert"),
])
def test_probe_outcome_failure_is_a_finding(result):
    findings, notes = probe_outcome(result)
    assert notes == []
    assert len(findings) == 1
    assert findings[0].rule_id is RuleID.CERTIFICATE
    assert findings[0].weight == 2
    assert findings[0].description == CERT_FAILURE_TEXT
