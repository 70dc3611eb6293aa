"""Exceptions raised by the dream session and its collaborators."""


class DreamOracleError(Exception):
    """Base class for every error this package raises on purpose."""


class SessionError(DreamOracleError):
    """A session operation was rejected.

    ``user_message`` is the non-technical text shown to the user.
    """

    def __init__(self, user_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message


class SessionValidationError(SessionError):
    """A required form field is empty."""


class SessionBusyError(SessionError):
    """The triggering control is disabled (loading or already recording)."""


class MicrophoneUnavailableError(SessionError):
    """Microphone permission was denied or the capture device failed."""


class ServiceError(DreamOracleError):
    """An external service failed or returned an unusable payload."""


class TranscriptionError(ServiceError):
    pass


class InterpretationError(ServiceError):
    pass


class MissingCredentialError(DreamOracleError):
    """No credential is configured for an external service.

    Raised lazily, the first time a call to that service is attempted.
    """

    def __init__(self, service: str, env_var: str) -> None:
        super().__init__(
            f"No credential configured for the {service} service: set {env_var} "
            f"in the environment or in .env before starting the server"
        )
        self.service = service
        self.env_var = env_var


class SessionNotFoundError(DreamOracleError):
    pass


class SessionClosedError(SessionError):
    """The session was torn down; it accepts no new work."""
