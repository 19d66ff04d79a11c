"""Heuristic URL checks.

Each rule is a pure function of a :class:`NormalizedURL` that returns a
:class:`Finding` when it fires and ``None`` otherwise. ``RULES`` fixes the
evaluation order, which is also the order findings are displayed and logged.
"""

import re
from typing import Callable, List, Optional, Tuple

from .models import Finding, NormalizedURL, RuleID

IP_HOST_RE = re.compile(r"(?:[0-9]{1,3}\.){3}[0-9]{1,3}")
SUSPICIOUS_TLDS: Tuple[str, ...] = ("xyz", "top", "tk", "ml", "ga", "cf", "gq")
MAX_HYPHENS = 3
MAX_URL_LENGTH = 100

WEIGHTS = {
    RuleID.IP_LITERAL_HOST: 3,
    RuleID.SUSPICIOUS_TLD: 2,
    RuleID.AT_SIGN: 2,
    RuleID.EXCESSIVE_HYPHENS: 1,
    RuleID.EXCESSIVE_LENGTH: 1,
    RuleID.CERTIFICATE: 2,
}

def _finding(rule_id: RuleID, description: str) -> Finding:
    return Finding(rule_id, description, WEIGHTS[rule_id])

def check_ip_literal_host(target: NormalizedURL) -> Optional[Finding]:
    # Octet values are not range-checked: 999.999.1.1 still counts.
    if IP_HOST_RE.fullmatch(target.host):
        return _finding(RuleID.IP_LITERAL_HOST, "Uses IP address instead of hostname")
    return None

def check_suspicious_tld(target: NormalizedURL) -> Optional[Finding]:
    host = target.host.lower()
    for tld in SUSPICIOUS_TLDS:
        if host.endswith("." + tld):
            return _finding(RuleID.SUSPICIOUS_TLD, f"Suspicious TLD detected: .{tld}")
    return None

def check_at_sign(target: NormalizedURL) -> Optional[Finding]:
    if "@" in target.full_url:
        return _finding(RuleID.AT_SIGN, "Contains '@' character")
    return None

def check_excessive_hyphens(target: NormalizedURL) -> Optional[Finding]:
    if target.host.count("-") > MAX_HYPHENS:
        return _finding(RuleID.EXCESSIVE_HYPHENS, "Excessive '-' characters in domain")
    return None

def check_excessive_length(target: NormalizedURL) -> Optional[Finding]:
    length = len(target.full_url)
    if length > MAX_URL_LENGTH:
        return _finding(RuleID.EXCESSIVE_LENGTH, f"URL length unusually long ({length} chars)")
    return None

Rule = Callable[[NormalizedURL], Optional[Finding]]

RULES: Tuple[Rule, ...] = (
    check_ip_literal_host,
    check_suspicious_tld,
    check_at_sign,
    check_excessive_hyphens,
    check_excessive_length,
)

def evaluate_rules(target: NormalizedURL, rules: Tuple[Rule, ...] = RULES) -> List[Finding]:
    findings: List[Finding] = []
    for rule in rules:
        finding = rule(target)
        if finding is not None:
            findings.append(finding)
    return findings
