"""Exception taxonomy for the director.

None of these escape a public director operation: each operation catches at
its own boundary and turns the failure into a no-op plus a report.
"""

from __future__ import annotations


class DirectorError(Exception):
    """Base class for all director failures."""


class ModelUnavailableError(DirectorError):
    """Predictors could not be loaded, even after training and one retry."""

    def __init__(self, model_names: list[str], message: str | None = None) -> None:
        self.model_names = list(model_names)
        super().__init__(message or f"Models unavailable: {', '.join(self.model_names)}")


class CatalogLookupMiss(DirectorError):
    """A requested id is absent from an external catalog."""

    def __init__(self, catalog: str, item_id: str) -> None:
        self.catalog = catalog
        self.item_id = item_id
        super().__init__(f"{catalog} catalog has no entry {item_id!r}")


class PlanningExhausted(DirectorError):
    """The planner ran out of attempts. Resolved by the fallback position."""

    def __init__(self, attempts: int, neighbours: int, separation: float) -> None:
        self.attempts = attempts
        self.neighbours = neighbours
        self.separation = separation
        super().__init__(
            f"Planning exhausted after {attempts} attempts ({neighbours} neighbours, sep={separation:.1f})"
        )


class CollisionRejected(DirectorError):
    """A structure candidate overlaps an existing structure's clearance."""

    def __init__(self, building_id: str, distance: float, required: float) -> None:
        self.building_id = building_id
        self.distance = distance
        self.required = required
        super().__init__(
            f"{building_id} rejected: nearest structure {distance:.2f} < {required:.2f}"
        )
