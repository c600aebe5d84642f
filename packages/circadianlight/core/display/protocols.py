"""Protocol for applying gamma gains to a display."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from circadianlight.core.schedule.models import GammaTriple


@runtime_checkable
class GammaApplier(Protocol):
    """Applies gamma gains to a single display output.

    Implementations raise DisplayUnavailable when no compatible display
    server or output is present.
    """

    def apply(self, gamma: GammaTriple) -> str:
        """Apply gains to the display.

        Args:
            gamma: Channel gains to apply

        Returns:
            Name of the output the gains were applied to

        Raises:
            DisplayUnavailable: If the display cannot be reached
        """
        ...
