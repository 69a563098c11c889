"""Provider-level errors."""


class ProviderError(RuntimeError):
    """A provider could not produce a response."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderRateLimitError(ProviderError):
    """The provider rejected the request with HTTP 429."""

    def __init__(self, provider: str, retry_after: float | None = None):
        detail = "rate limited"
        if retry_after is not None:
            detail += f" (retry after {retry_after:.0f}s)"
        super().__init__(provider, detail)
        self.retry_after = retry_after
