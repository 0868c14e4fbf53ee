"""Per-request resolution errors."""


class ResolutionError(Exception):
    """A single request could not be resolved to a redirect target.

    Recoverable: the request fails with an error response, other
    requests are unaffected. ``message`` is safe to return to clients.
    """

    default_message = "Redirect resolution failed"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class PoolNotFound(ResolutionError):
    """No pool is registered under the requested id."""

    default_message = "Pool not found"


class NoDomainsAvailable(ResolutionError):
    """The selected domain set is empty or has no positive weight."""

    default_message = "No domains available for redirection"


class InvalidWeight(ResolutionError):
    """A domain carries a weight that is not a non-negative integer."""

    default_message = "Invalid weight type"


class MalformedPath(ResolutionError):
    """The request path does not name a pool and a target path."""

    default_message = "Invalid URL format"
