"""
Error taxonomy.

We separate error types so callers can react correctly.
Example:
ConfigAbsent means no config was provided, the provisioner falls back to random GUIDs.
ConfigParseError and ConfigValidationError must abort startup.
PoolLookupError is recoverable and only triggers the random fallback.
"""


class IbGuidError(Exception):
    """Base class for all GUID provisioning exceptions."""


class ConfigError(IbGuidError):
    """Raised when the GUID config cannot be turned into a table."""


class ConfigAbsent(ConfigError, FileNotFoundError):
    """Raised when the GUID config file does not exist."""


class ConfigParseError(ConfigError):
    """Raised when the GUID config file is not a JSON array of records."""


class ConfigValidationError(ConfigError):
    """Raised when a config record violates identity or allocation rules."""


class LinkResolutionError(ConfigError):
    """Raised when a PF GUID cannot be mapped to a PCI address."""


class GuidParseError(IbGuidError, ValueError):
    """Raised when a string is not a canonical 8 byte GUID."""


class PoolLookupError(IbGuidError):
    """Base class for GUID pool lookup failures."""


class GuidPoolNotFound(PoolLookupError):
    """Raised when no pool is configured for a PF PCI address."""


class GuidPoolExhausted(PoolLookupError):
    """Raised when a VF index falls outside the configured list or range."""


class HostOperationFailed(IbGuidError):
    """Raised by host collaborators when a GUID write or unbind fails."""
