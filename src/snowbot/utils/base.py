"""Validation result shared by structural checks."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    """Result of a structural check on a forecast response.

    Attributes:
        valid: Whether the response passed all checks
        n_times: Number of timesteps on the (flattened) time axis
        n_locations: Number of query locations the response is decoded against
        issues: List of problems found
        stats: Dictionary of extra facts gathered during the check
    """

    valid: bool
    n_times: int = 0
    n_locations: int = 0
    issues: list[str] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)

    @property
    def expected_values(self) -> int:
        """Number of values a complete time x location grid holds."""
        return self.n_times * self.n_locations

    def __str__(self) -> str:
        status = "VALID" if self.valid else "INVALID"
        return (
            f"ValidationResult({status}, "
            f"times={self.n_times}, "
            f"locations={self.n_locations}, "
            f"issues={len(self.issues)})"
        )
