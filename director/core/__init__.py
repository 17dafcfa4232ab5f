"""Core data models: entities, behaviors, catalogs, and tasks."""

from director.core.enums import Domain, ModelKind, ModelState, Region, Severity, TaskState
from director.core.models import Bounds, EnemyEntity, StructureEntity, Vector3
from director.core.behaviors import EnemyBehavior
from director.core.catalog import CharacterEntry, Footprint, StaticCatalog, StructureEntry
from director.core.tasks import Task, TaskDirector

__all__ = [
    "Bounds",
    "CharacterEntry",
    "Domain",
    "EnemyBehavior",
    "EnemyEntity",
    "Footprint",
    "ModelKind",
    "ModelState",
    "Region",
    "Severity",
    "StaticCatalog",
    "StructureEntity",
    "StructureEntry",
    "Task",
    "TaskDirector",
    "TaskState",
    "Vector3",
]
