"""Character and structure catalogs.

Asset loading lives outside the director; these are the shapes the director
reads and a static provider built from plain data (or a JSON file).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Footprint:
    """Plan-view size of a structure."""

    width: float
    depth: float

    @property
    def span(self) -> float:
        return max(self.width, self.depth)


@dataclass(frozen=True, slots=True)
class CharacterEntry:
    id: str
    name: str = ""
    footprint: Footprint | None = None


@dataclass(frozen=True, slots=True)
class StructureEntry:
    id: str
    footprint: Footprint


# Fixed building catalog the structure predictor was trained against
BUILDING_IDS: tuple[str, ...] = (
    "building-type-a",
    "building-type-b",
    "building-type-c",
    "building-type-d",
)

DEFAULT_CHARACTERS: tuple[CharacterEntry, ...] = (
    CharacterEntry("character-male-a", "Rook"),
    CharacterEntry("character-female-b", "Vale"),
    CharacterEntry("character-male-c", "Brand"),
    CharacterEntry("character-female-d", "Ash"),
)

DEFAULT_STRUCTURES: tuple[StructureEntry, ...] = (
    StructureEntry("building-type-a", Footprint(4.0, 4.0)),
    StructureEntry("building-type-b", Footprint(6.0, 4.0)),
    StructureEntry("building-type-c", Footprint(5.0, 5.0)),
    StructureEntry("building-type-d", Footprint(8.0, 6.0)),
)


class StaticCatalog:
    """In-process catalog provider. Every known id maps to a model handle."""

    __slots__ = ("_characters", "_structures", "_handles")

    def __init__(
        self,
        characters: list[CharacterEntry] | tuple[CharacterEntry, ...] = DEFAULT_CHARACTERS,
        structures: list[StructureEntry] | tuple[StructureEntry, ...] = DEFAULT_STRUCTURES,
        handles: dict[str, str] | None = None,
    ) -> None:
        self._characters = list(characters)
        self._structures = list(structures)
        if handles is None:
            handles = {c.id: f"model:{c.id}" for c in self._characters}
            handles.update({s.id: f"model:{s.id}" for s in self._structures})
        self._handles = dict(handles)

    @classmethod
    def from_json(cls, path: str | Path) -> StaticCatalog:
        """Load ``{"characters": [...], "structures": [...]}``."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        characters = [
            CharacterEntry(
                id=c["id"],
                name=c.get("name", ""),
                footprint=Footprint(**c["footprint"]) if c.get("footprint") else None,
            )
            for c in data.get("characters", [])
        ]
        structures = [
            StructureEntry(id=s["id"], footprint=Footprint(**s["footprint"]))
            for s in data.get("structures", [])
        ]
        return cls(characters, structures)

    def get_character_catalog(self) -> list[CharacterEntry]:
        return list(self._characters)

    def get_structure_catalog(self) -> list[StructureEntry]:
        return list(self._structures)

    def get_model(self, item_id: str) -> str | None:
        return self._handles.get(item_id)
