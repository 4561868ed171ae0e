"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, max_content_length=1024 * 1024)
    """

    # Log every dispatch decision on the ``perch.app`` logger at DEBUG level
    debug: bool = False

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # GraphQL: when False, POST content types are compared without
    # parameters (``application/json; charset=utf-8`` is accepted)
    strict_graphql_content_type: bool = True
