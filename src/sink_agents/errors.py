"""
Exception hierarchy for the agent services.

Client modules raise the upstream subclasses with the message the remote
service returned; pipeline stages turn them into explicit stage failures.
"""

from __future__ import annotations


class AgentError(Exception):
    """Base exception for all agent service errors."""


class ConfigurationError(AgentError):
    """Raised when required environment settings are missing."""


# =============================================================================
# Upstream service errors
# =============================================================================


class UpstreamError(AgentError):
    """Base exception for failures reported by an external service."""


class OpenSinkError(UpstreamError):
    """Raised when the session, configuration or sink store rejects a call."""


class NewsSourceError(UpstreamError):
    """Raised when the news API call fails."""


class ScraperError(UpstreamError):
    """Raised when the scraping actor fails or does not finish."""


class LanguageModelError(UpstreamError):
    """Raised when the language model declines or the completion call fails."""
