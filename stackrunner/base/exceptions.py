"""
Stackrunner exception hierarchy.

Every failure surfaced by the provider inherits from :class:`ProviderError`.
Sub-exceptions separate configuration problems, name resolution, override
validation and wrapped CloudStack API failures so callers can decide which
ones are fatal for them.
"""


# ── Base ──────────────────────────────────────────────────────────────
class ProviderError(Exception):
    """Root exception for all Stackrunner errors."""


# ── Configuration ─────────────────────────────────────────────────────
class ConfigError(ProviderError):
    """Provider configuration is missing a required field or is unreadable."""


# ── Name resolution ───────────────────────────────────────────────────
class ResolutionError(ProviderError):
    """A symbolic zone / offering / template / project name could not be resolved."""


class NotFoundError(ProviderError):
    """No resource matched the requested name or identifier."""


class AmbiguousMatchError(ProviderError):
    """More than one resource matched where exactly one was required."""


# ── Validation ────────────────────────────────────────────────────────
class ValidationError(ProviderError):
    """Override document or runner spec is invalid or incomplete."""


# ── Platform ──────────────────────────────────────────────────────────
class PlatformError(ProviderError):
    """A CloudStack API call failed."""
