"""Builder configuration.

BuilderConfig is a frozen dataclass — immutable after creation, shared by
every node of a router tree.
"""

from dataclasses import dataclass
from typing import Literal

from muxtree.errors import ConfigurationError

DuplicatePolicy = Literal["overwrite", "warn", "error"]

_DUPLICATE_POLICIES = ("overwrite", "warn", "error")


@dataclass(frozen=True, slots=True)
class BuilderConfig:
    """Builder configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = BuilderConfig(duplicates="error", debug=True)
    """

    # Method for bare "/path" patterns
    default_method: str = "GET"

    # What build() does when two registrations land in the same registry slot
    duplicates: DuplicatePolicy = "overwrite"

    # Put the exception summary into 500 bodies
    debug: bool = False

    # One DEBUG line on "muxtree.builder" per registration
    log_registrations: bool = True

    def __post_init__(self) -> None:
        if self.duplicates not in _DUPLICATE_POLICIES:
            msg = (
                f"Unknown duplicates policy {self.duplicates!r}. "
                f"Expected one of: {', '.join(_DUPLICATE_POLICIES)}."
            )
            raise ConfigurationError(msg)
        if not self.default_method or not self.default_method.strip():
            msg = "default_method must be a non-empty HTTP method."
            raise ConfigurationError(msg)
