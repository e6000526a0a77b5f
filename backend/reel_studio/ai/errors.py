"""Errors raised at the AI provider boundary."""


class ProviderConfigError(RuntimeError):
    """No usable credentials are configured for a provider."""


class ReelServiceError(RuntimeError):
    """A generation request failed or returned something unusable.

    The message is meant to be shown to the user as-is.
    """
