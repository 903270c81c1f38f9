class ConfigurationError(Exception):
    """Raised when a required credential or URL is missing."""
