from __future__ import annotations


class UpstreamUnavailable(Exception):
    """A generative backend failed or answered with something unusable.

    Network errors, timeouts, non-JSON text and JSON that does not match the
    expected model all collapse into this one failure class, so every stage
    can route them into the same fallback.
    """


class PlacesAPIError(Exception):
    """The place-search backend errored or returned a non-OK status."""


class ConfigurationError(Exception):
    """A required credential is missing; the service must not start."""
