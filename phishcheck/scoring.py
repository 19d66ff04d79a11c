from typing import Iterable

from .models import Finding, Note, RiskLevel, ScoreReport

HIGH_RISK_SCORE = 7
MEDIUM_RISK_SCORE = 4

EXIT_CODES = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
}

def total_score(findings: Iterable[Finding]) -> int:
    return sum(f.weight for f in findings)

def risk_level_for(score: int) -> RiskLevel:
    if score >= HIGH_RISK_SCORE:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW

def aggregate(url: str, findings: Iterable[Finding], notes: Iterable[Note] = ()) -> ScoreReport:
    """Build the final report. Input order is preserved in the output."""
    findings = tuple(findings)
    score = total_score(findings)
    return ScoreReport(
        url=url,
        total_score=score,
        risk_level=risk_level_for(score),
        findings=findings,
        notes=tuple(notes),
    )

def exit_code_for(level: RiskLevel) -> int:
    return EXIT_CODES[level]
