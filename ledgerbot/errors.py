class LedgerBotError(Exception):
    """Base class for failures whose message is meant for the operator."""


class InvalidInputError(LedgerBotError, ValueError):
    """Raised when command arguments or conversation input are malformed."""
