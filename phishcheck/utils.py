import logging
import re

from .exceptions import InvalidInputError
from .models import AnalysisRequest, NormalizedURL

DEFAULT_SCHEME = "https://"
SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

logger = logging.getLogger("phishcheck")

def has_scheme(url: str) -> bool:
    return SCHEME_RE.match(url) is not None

def ensure_scheme(url: str) -> str:
    url = url.strip()
    if not has_scheme(url):
        url = DEFAULT_SCHEME + url
    return url

def extract_host(url: str) -> str:
    """Drop one leading scheme and everything from the first '/' on.

    Ports, userinfo and percent-escapes are left exactly as typed.
    """
    rest = SCHEME_RE.sub("", url, count=1)
    return rest.split("/", 1)[0]

def normalize_url(raw) -> NormalizedURL:
    if isinstance(raw, AnalysisRequest):
        raw = raw.raw_input
    if raw is None or not raw.strip():
        raise InvalidInputError("A URL is required.")
    full = ensure_scheme(raw)
    return NormalizedURL(full_url=full, host=extract_host(full))
