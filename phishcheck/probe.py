"""TLS certificate probe.

Opens a TLS connection to ``host:443`` with SNI set to the host and reads the
expiry of whatever leaf certificate the server presents. The chain is not
verified: a self-signed or mismatched certificate still yields its expiry, a
failed connection or handshake does not.

The whole attempt, DNS resolution included, is bounded by one wall-clock
deadline. It runs on a daemon worker thread; when the deadline passes the
in-flight socket is shut down and the probe reports the host as unreachable.
"""

import socket
import ssl
import threading
import time
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from cryptography import x509

from .models import CertificateProbeResult, Finding, Note, RuleID
from .rules import WEIGHTS
from .utils import logger

DEFAULT_PROBE_TIMEOUT = 8.0
DEFAULT_TLS_PORT = 443
CERT_FAILURE_TEXT = "Could not verify SSL certificate or connection failed"
MIN_SOCKET_TIMEOUT = 0.001

def format_not_after(when: datetime) -> str:
    """Render a timestamp the way ``openssl x509 -dates`` prints it."""
    when = when.astimezone(timezone.utc)
    return f"{when:%b} {when.day:2d} {when:%H:%M:%S} {when.year} GMT"

class _Attempt:
    """Owns the socket of one probe attempt; close() is safe from any thread."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sock: Optional[socket.socket] = None
        self._closed = False
        self.result: Optional[CertificateProbeResult] = None

    def adopt(self, sock: socket.socket) -> socket.socket:
        with self._lock:
            if self._closed:
                sock.close()
                raise ConnectionAbortedError("probe cancelled")
            self._sock = sock
        return sock

    def close(self) -> None:
        with self._lock:
            self._closed = True
            sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()

def _remaining(deadline: float) -> float:
    return max(deadline - time.monotonic(), MIN_SOCKET_TIMEOUT)

class CertificateProber:
    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT, port: int = DEFAULT_TLS_PORT):
        if timeout <= 0:
            raise ValueError("probe timeout must be positive")
        self.timeout = float(timeout)
        self.port = int(port)

    @classmethod
    def from_config(cls, config) -> "CertificateProber":
        return cls(
            timeout=float(config.get("network.probe_timeout", DEFAULT_PROBE_TIMEOUT)),
            port=int(config.get("network.port", DEFAULT_TLS_PORT)),
        )

    def probe(self, host: str) -> CertificateProbeResult:
        if not host:
            return CertificateProbeResult.invalid("empty host")

        attempt = _Attempt()
        deadline = time.monotonic() + self.timeout
        worker = threading.Thread(
            target=self._run,
            args=(host, deadline, attempt),
            name=f"cert-probe-{host}",
            daemon=True,
        )
        worker.start()
        try:
            worker.join(self.timeout)
        finally:
            if worker.is_alive():
                attempt.close()

        if worker.is_alive():
            logger.info(f"TLS probe of {host}:{self.port} timed out after {self.timeout:g}s")
            return CertificateProbeResult.unreachable(f"timed out after {self.timeout:g}s")
        if attempt.result is None:
            return CertificateProbeResult.unreachable("probe aborted")
        return attempt.result

    def _run(self, host: str, deadline: float, attempt: _Attempt) -> None:
        try:
            result = self._handshake(host, deadline, attempt)
        except ssl.SSLError as e:
            result = CertificateProbeResult.invalid(f"TLS handshake failed: {e}")
        except OSError as e:
            result = CertificateProbeResult.unreachable(f"connection failed: {e}")
        except ValueError as e:
            result = CertificateProbeResult.invalid(f"unreadable certificate: {e}")
        finally:
            attempt.close()
        if not result.ok:
            logger.info(f"TLS probe of {host}:{self.port}: {result.status.value} ({result.detail})")
        attempt.result = result

    def _handshake(self, host: str, deadline: float, attempt: _Attempt) -> CertificateProbeResult:
        raw = attempt.adopt(socket.create_connection((host, self.port), timeout=_remaining(deadline)))

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

        raw.settimeout(_remaining(deadline))
        tls = attempt.adopt(context.wrap_socket(raw, server_hostname=host, do_handshake_on_connect=False))
        tls.do_handshake()
        der = tls.getpeercert(binary_form=True)
        if not der:
            return CertificateProbeResult.invalid("no certificate presented")

        cert = x509.load_der_x509_certificate(der)
        return CertificateProbeResult.valid(format_not_after(cert.not_valid_after_utc))

def probe_outcome(result: CertificateProbeResult) -> Tuple[List[Finding], List[Note]]:
    """Fold a probe result into scoring findings and informational notes."""
    if result.ok and result.not_after:
        return [], [Note(f"SSL valid until: {result.not_after}")]
    return [Finding(RuleID.CERTIFICATE, CERT_FAILURE_TEXT, WEIGHTS[RuleID.CERTIFICATE])], []
