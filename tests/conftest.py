import pytest

from phishcheck.models import CertificateProbeResult

class StubProber:
    """Stands in for CertificateProber without touching the network."""

    def __init__(self, result=None):
        self.result = result or CertificateProbeResult.unreachable("stub")
        self.hosts = []

    def probe(self, host):
        self.hosts.append(host)
        return self.result

@pytest.fixture
def unreachable_prober():
    return StubProber()

@pytest.fixture
def valid_prober():
    return StubProber(CertificateProbeResult.valid("Jan  2 03:04:05 2030 GMT"))

@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with no config files, no overrides and logs under tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("PHISHCHECK_CONFIG", "PHISHCHECK_TIMEOUT", "PHISHCHECK_PORT",
                "PHISHCHECK_LOG_LEVEL", "VIRUSTOTAL_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("PHISHCHECK_LOG_DIR", str(tmp_path / "logs"))
    return tmp_path
