class PhishcheckError(Exception):
    """Base class for phishcheck errors."""
    pass

class InvalidInputError(PhishcheckError):
    """Raised when there is no URL to analyze."""
    pass

class UsageError(PhishcheckError):
    """Command-line misuse; reported with usage text and exit code 2."""
    pass

class PhishcheckConfigError(PhishcheckError):
    """Custom exception for phishcheck configuration errors."""
    pass
