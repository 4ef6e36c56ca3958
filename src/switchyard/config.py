"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Routing and adapter configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, method_override_field="_verb")
    """

    # Development
    debug: bool = False

    # Method gate
    method_override_field: str = "_method"  # form field consulted on POST
    head_as_get: bool = True  # GET routes answer HEAD with the body cleared

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB


DEFAULT_CONFIG = AppConfig()
