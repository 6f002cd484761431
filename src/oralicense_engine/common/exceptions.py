"""OraLicense-Engine exception hierarchy."""


class OraLicenseError(Exception):
    """Base exception for all OraLicense errors."""

    def __init__(self, message: str = "", code: str = "ORALICENSE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class RemoteSourceError(OraLicenseError):
    """Raised when a remote data source cannot be reached or answers non-2xx."""

    def __init__(self, message: str = "Remote source unavailable", code: str = "REMOTE_UNAVAILABLE"):
        super().__init__(message, code=code)


class MalformedPayloadError(RemoteSourceError):
    """Raised when a remote response does not decode to the expected shape."""

    def __init__(self, message: str = "Malformed remote payload"):
        super().__init__(message, code="MALFORMED_PAYLOAD")


class AlertSubmissionError(OraLicenseError):
    """Raised when the alert service refuses or cannot receive an alert."""

    def __init__(self, message: str = "Alert submission failed"):
        super().__init__(message, code="ALERT_SUBMISSION_FAILED")


class HostNotFoundError(OraLicenseError):
    """Raised when no current snapshot exists for a hostname."""

    def __init__(self, message: str = "Host not found"):
        super().__init__(message, code="NOT_FOUND")
