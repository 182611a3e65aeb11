class PipelineError(Exception):
    pass


class SourceUnavailable(PipelineError):
    """A single news or image source failed; callers move on to the next one."""


class AIServiceUnavailable(PipelineError):
    """The generative service could not produce text (retries exhausted or fatal error)."""


class InvalidRequest(AIServiceUnavailable):
    """Vendor rejected the request (HTTP 400). Never retried."""


class AuthorizationDenied(AIServiceUnavailable):
    """Vendor refused our credentials (HTTP 403). Never retried."""


class ParseFailure(PipelineError):
    """Raised inside the response parser only."""


class NotFound(PipelineError):
    pass


class Forbidden(PipelineError):
    pass


class InvalidTransition(PipelineError, ValueError):
    pass


class PublishFailed(PipelineError):
    """Post creation failed; the suggestion was left untouched."""
