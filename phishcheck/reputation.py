"""Pluggable URL reputation lookups.

No service is queried in this version. A configured API key is only
acknowledged with a note; :class:`NullReputationService` is what the scanner
uses unless a caller supplies a real implementation.
"""

from typing import List, Optional

from .models import Note

DEFAULT_API_KEY_ENV = "VIRUSTOTAL_API_KEY"
KEY_CONFIGURED_TEXT = "VirusTotal key configured (reputation checks available)"

class ReputationService:
    """Base class for reputation lookups."""
    name = "reputation"

    def lookup(self, url: str) -> List[Note]:
        """Override to return notes about ``url`` from an external feed."""
        return []

class NullReputationService(ReputationService):
    name = "none"

def reputation_key_notes(api_key: Optional[str]) -> List[Note]:
    if api_key and api_key.strip():
        return [Note(KEY_CONFIGURED_TEXT)]
    return []
