from typing import List, Optional

from .models import Finding, Note, ScoreReport
from .probe import CertificateProber, probe_outcome
from .reputation import NullReputationService, ReputationService, reputation_key_notes
from .rules import evaluate_rules
from .scoring import aggregate
from .utils import logger, normalize_url

def scan(
    raw,
    prober: CertificateProber,
    reputation: Optional[ReputationService] = None,
    api_key: Optional[str] = None,
) -> ScoreReport:
    """Score one URL.

    ``raw`` is a string or :class:`AnalysisRequest`. Only an empty input
    raises (``InvalidInputError``); every check failure after normalization
    ends up in the report as a finding or a note.
    """
    target = normalize_url(raw)
    logger.debug(f"Scanning {target.full_url} (host {target.host!r})")

    findings: List[Finding] = evaluate_rules(target)
    notes: List[Note] = []

    cert_findings, cert_notes = probe_outcome(prober.probe(target.host))
    findings.extend(cert_findings)
    notes.extend(cert_notes)

    notes.extend(reputation_key_notes(api_key))
    service = reputation or NullReputationService()
    notes.extend(service.lookup(target.full_url))

    report = aggregate(target.full_url, findings, notes)
    logger.debug(f"Score {report.total_score} -> {report.risk_level.value}")
    return report
