__version__ = "1.0.0"

from .models import AnalysisRequest, CertificateProbeResult, Finding, NormalizedURL, Note, ProbeStatus, RiskLevel, RuleID, ScoreReport
from .scanner import scan
from .scoring import aggregate, exit_code_for, risk_level_for
from .utils import normalize_url, logger
