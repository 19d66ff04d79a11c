from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

class RuleID(str, Enum):
    IP_LITERAL_HOST = "ip_literal_host"
    SUSPICIOUS_TLD = "suspicious_tld"
    AT_SIGN = "at_sign"
    EXCESSIVE_HYPHENS = "excessive_hyphens"
    EXCESSIVE_LENGTH = "excessive_length"
    CERTIFICATE = "certificate"

class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return RISK_LABELS[self]

RISK_LABELS = {
    RiskLevel.LOW: "Low Risk (Likely Safe)",
    RiskLevel.MEDIUM: "Medium Risk (Suspicious)",
    RiskLevel.HIGH: "High Risk (Phishing Likely)",
}

class ProbeStatus(str, Enum):
    VALID = "valid"
    UNREACHABLE = "unreachable"
    INVALID = "invalid"

@dataclass(frozen=True)
class AnalysisRequest:
    raw_input: str

@dataclass(frozen=True)
class NormalizedURL:
    full_url: str
    host: str

@dataclass(frozen=True)
class Finding:
    rule_id: RuleID
    description: str
    weight: int

@dataclass(frozen=True)
class Note:
    text: str

@dataclass(frozen=True)
class CertificateProbeResult:
    status: ProbeStatus
    not_after: Optional[str] = None
    detail: str = ""

    @classmethod
    def valid(cls, not_after: str) -> "CertificateProbeResult":
        return cls(ProbeStatus.VALID, not_after=not_after)

    @classmethod
    def unreachable(cls, detail: str = "") -> "CertificateProbeResult":
        return cls(ProbeStatus.UNREACHABLE, detail=detail)

    @classmethod
    def invalid(cls, detail: str = "") -> "CertificateProbeResult":
        return cls(ProbeStatus.INVALID, detail=detail)

    @property
    def ok(self) -> bool:
        return self.status is ProbeStatus.VALID

@dataclass(frozen=True)
class ScoreReport:
    url: str
    total_score: int
    risk_level: RiskLevel
    findings: Tuple[Finding, ...] = field(default_factory=tuple)
    notes: Tuple[Note, ...] = field(default_factory=tuple)

    @property
    def issues(self) -> Tuple[str, ...]:
        return tuple(f.description for f in self.findings)

    def to_dict(self) -> Dict[str, Any]:
        """Structured form used by the JSON renderer."""
        return {
            "url": self.url,
            "score": self.total_score,
            "risk": self.risk_level.label,
            "issues": list(self.issues),
            "notes": [n.text for n in self.notes],
        }
