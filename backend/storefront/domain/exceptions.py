class HomepageError(Exception):
    """Base class for every error raised by the homepage domain."""


class ValidationError(HomepageError):
    """Malformed section payload (missing name/type, unknown type, bad config)."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


class NotFound(HomepageError):
    """Unknown section or catalog record id."""


class SectionNotPublic(HomepageError):
    """Section exists but is not both active and published."""


class ResolutionFailure(HomepageError):
    """Data for a section could not be resolved. Never fatal."""


class PlacementFallback(HomepageError):
    """A banner location could not be resolved; it goes to the bottom."""


class PipelineAbort(HomepageError):
    """The section list itself could not be obtained."""
