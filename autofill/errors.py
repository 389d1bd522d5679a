"""
Exceptions raised inside the autofill engine
"""


class AutofillError(Exception):
    pass


class ConfigError(AutofillError):
    """A configuration value has the wrong shape."""


class ChainAbort(AutofillError):
    """Stops a profile chain; reports of already executed profiles are kept."""

    status = "failed"

    def __init__(self, profile_id, message):
        super().__init__(message)
        self.profile_id = profile_id
        self.message = message


class CircularChainError(ChainAbort):
    status = "circular"

    def __init__(self, profile_id):
        super().__init__(profile_id, "Circular profile chain detected - stopped")


class ChainTooLongError(ChainAbort):
    status = "too_long"

    def __init__(self, profile_id, depth):
        super().__init__(profile_id, f"Profile chain too long ({depth} hops) - stopped")
        self.depth = depth
