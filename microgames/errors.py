from __future__ import annotations


class ConfigurationError(RuntimeError):
    """The microgame catalog is missing, empty or malformed.

    Fatal for the session: no game can start until the catalog is fixed.
    """


class MissingDescriptorError(LookupError):
    """No current microgame is selected when a round should start."""
