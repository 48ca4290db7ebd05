class PolicyError(Exception):
    """Raised when the scheduling policy document is missing or invalid."""
