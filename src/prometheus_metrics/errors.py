class PrometheusMetricsError(Exception):
    """Base error for this package."""


class ConfigError(PrometheusMetricsError):
    """Invalid invocation, detected before any request is sent."""


class InvalidAuthFormat(ConfigError):
    def __init__(self) -> None:
        super().__init__("auth must be in the form user:password")


class IncompleteCredentials(ConfigError):
    def __init__(self, missing: str, present: str) -> None:
        self.missing = missing
        super().__init__(f"--{missing} is required when using --{present}")


class MissingMatcher(ConfigError):
    def __init__(self) -> None:
        super().__init__("--match is required for series queries")


class InvalidUrl(ConfigError):
    """Base URL or endpoint path could not be turned into an absolute URL."""


class TransportError(PrometheusMetricsError):
    """Request never produced an HTTP response (connect, TLS, timeout)."""


class PrometheusAPIError(PrometheusMetricsError):
    """Prometheus API call failed."""


class MalformedResponse(PrometheusAPIError):
    def __init__(self, http_status: int, body_preview: str) -> None:
        self.http_status = http_status
        self.body_preview = body_preview
        super().__init__(
            f"failed to parse response as JSON (status {http_status}): {body_preview}"
        )


class RemoteError(PrometheusAPIError):
    def __init__(self, error_type: str, error_message: str) -> None:
        self.error_type = error_type
        self.error_message = error_message
        super().__init__(f"API error ({error_type}): {error_message}")


class OutputError(PrometheusMetricsError):
    """Value cannot be rendered in the requested output mode."""


class NotAnArray(OutputError):
    def __init__(self) -> None:
        super().__init__("expected an array response for lines output")
