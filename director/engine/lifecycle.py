"""Entity lifecycle manager: the authoritative lists of enemies and structures.

Spawning and placement go through the inference cache and the safety
planner; movement is one pass per tick; a periodic prune removes dead
enemies and expired cache entries. Every public operation absorbs its own
failures so a bad spawn never stalls the calling game loop.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from director.core.behaviors import classify, derive_stats, step_enemy
from director.core.enums import Domain, ModelKind, Region
from director.core.models import Bounds, EnemyEntity, EntityIdAllocator, StructureEntity, Vector3
from director.errors import CatalogLookupMiss, CollisionRejected, ModelUnavailableError
from director.inference.predictors import enemy_features, structure_features

if TYPE_CHECKING:
    from director.collaborators import CatalogProvider, ErrorReporter, SceneGraphHost
    from director.config import DirectorConfig
    from director.core.catalog import CharacterEntry
    from director.inference.cache import InferenceCache
    from director.systems.planner import SpawnSafetyPlanner
    from director.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PruneReport:
    enemies_removed: int = 0
    cache_entries_removed: int = 0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class EntityLifecycleManager:
    """Owns every live enemy and structure."""

    __slots__ = (
        "_config", "_cache", "_planner", "_catalog", "_scene", "_reporter",
        "_rng", "_clock", "_ids", "_bounds", "_enemies", "_structures",
        "_last_prune", "_disposed",
    )

    def __init__(
        self,
        config: DirectorConfig,
        cache: InferenceCache,
        planner: SpawnSafetyPlanner,
        catalog: CatalogProvider,
        scene: SceneGraphHost,
        reporter: ErrorReporter,
        rng: DeterministicRNG,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._cache = cache
        self._planner = planner
        self._catalog = catalog
        self._scene = scene
        self._reporter = reporter
        self._rng = rng
        self._clock = clock
        self._ids = EntityIdAllocator()
        self._bounds = Bounds.square(config.world_half_extent)
        self._enemies: list[EnemyEntity] = []
        self._structures: list[StructureEntity] = []
        self._last_prune: float = clock()
        self._disposed = False

    # -- accessors --

    @property
    def enemies(self) -> list[EnemyEntity]:
        """The live list itself. Callers that mutate it bypass scene bookkeeping."""
        return self._enemies

    @property
    def structures(self) -> list[StructureEntity]:
        return self._structures

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    @property
    def alive_count(self) -> int:
        return sum(1 for e in self._enemies if e.alive)

    def get_enemy(self, enemy_id: int) -> EnemyEntity | None:
        for enemy in self._enemies:
            if enemy.id == enemy_id:
                return enemy
        return None

    # -- spawning --

    def spawn_enemies(self, level: int, current_count: int, density: float) -> list[EnemyEntity]:
        """Spawn a predicted batch of enemies. Returns the new entities (maybe none)."""
        if self._disposed:
            return []
        if self.alive_count >= self._config.max_enemies:
            logger.debug("Enemy cap %d reached, spawn skipped", self._config.max_enemies)
            return []
        try:
            return self._spawn_enemies(level, current_count, density)
        except (CatalogLookupMiss, ModelUnavailableError) as exc:
            logger.debug("spawn_enemies abandoned: %s", exc)
        except Exception as exc:
            self._reporter.report(exc, "spawn_enemies")
        return []

    def _spawn_enemies(self, level: int, current_count: int, density: float) -> list[EnemyEntity]:
        output = self._cache.predict(ModelKind.ENEMY, enemy_features(level, current_count, density))
        behavior = classify(output[0], self._config.fast_threshold)
        count = min(
            max(round_half_up(output[1]), 1),
            self._config.max_spawn_per_call,
            self._config.max_enemies - self.alive_count,
        )
        characters = self._catalog.get_character_catalog()
        if not characters:
            raise CatalogLookupMiss("character", "<any>")

        health, speed, damage = derive_stats(behavior, level, self._config)
        occupied = [e.pos for e in self._enemies] + [s.pos for s in self._structures]

        # Resolve the whole batch before committing any of it
        resolved: list[tuple[CharacterEntry, str, Vector3]] = []
        for _ in range(count):
            key = self._planner.next_key()
            character = characters[self._rng.next_int(Domain.CHARACTER, key, 0, 0, len(characters) - 1)]
            handle = self._catalog.get_model(character.id)
            if handle is None:
                raise CatalogLookupMiss("character", character.id)
            pos = self._planner.find_safe_position(
                occupied, self._config.enemy_min_separation, self._bounds, key=key,
            )
            occupied.append(pos)
            resolved.append((character, handle, pos))

        now = self._clock()
        spawned: list[EnemyEntity] = []
        for character, handle, pos in resolved:
            enemy = EnemyEntity(
                id=self._ids.allocate(), character_id=character.id, handle=handle,
                pos=pos, health=health, max_health=health, speed=speed,
                damage=damage, behavior=behavior, level=level,
                created_at=now, last_update=now,
            )
            self._scene.add_to_scene(handle)
            self._enemies.append(enemy)
            spawned.append(enemy)
        logger.info("Spawned %d %s enemies (level %d)", len(spawned), behavior.label, level)
        return spawned

    def place_structure(self, level: int, current_count: int, region: Region) -> StructureEntity | None:
        """Place one predicted building, or nothing if it would collide."""
        if self._disposed:
            return None
        try:
            return self._place_structure(level, current_count, region)
        except CollisionRejected as exc:
            logger.debug("%s", exc)
        except (CatalogLookupMiss, ModelUnavailableError) as exc:
            logger.debug("place_structure abandoned: %s", exc)
        except Exception as exc:
            self._reporter.report(exc, "place_structure")
        return None

    def denormalize_structure(self, output: tuple[float, ...], catalog_size: int) -> tuple[int, float, float]:
        """Map (type, x, z) outputs to (catalog index, world x, world z)."""
        index = min(max(round_half_up(output[0] * (catalog_size - 1)), 0), catalog_size - 1)
        span = self._config.structure_coord_range
        x = output[1] * span - span / 2.0
        z = output[2] * span - span / 2.0
        return index, x, z

    def _place_structure(self, level: int, current_count: int, region: Region) -> StructureEntity:
        output = self._cache.predict(ModelKind.STRUCTURE, structure_features(level, current_count, region))
        entries = self._catalog.get_structure_catalog()
        if not entries:
            raise CatalogLookupMiss("structure", "<any>")

        index, x, z = self.denormalize_structure(output, len(entries))
        entry = entries[index]
        handle = self._catalog.get_model(entry.id)
        if handle is None:
            raise CatalogLookupMiss("structure", entry.id)

        pos = self._bounds.clamp(Vector3(x, self._bounds.floor_y, z))
        required = self._planner.structure_separation(entry.footprint)
        placed = [s.pos for s in self._structures]
        if not self._planner.is_clear(pos, placed, required):
            nearest = min(pos.planar_distance(p) for p in placed)
            raise CollisionRejected(entry.id, nearest, required)

        structure = StructureEntity(
            id=self._ids.allocate(), building_id=entry.id, handle=handle,
            pos=pos, footprint=entry.footprint, created_at=self._clock(),
        )
        self._scene.add_to_scene(handle)
        self._structures.append(structure)
        logger.info("Placed %s at %s", entry.id, pos)
        return structure

    # -- combat --

    def apply_damage(self, enemy_id: int, amount: int) -> int | None:
        """Reduce an enemy's health. Removal waits for the next prune."""
        enemy = self.get_enemy(enemy_id)
        if enemy is None or not enemy.alive:
            return None
        enemy.health = max(enemy.health - max(amount, 0), 0)
        return enemy.health

    # -- per-tick --

    def advance(self, now: float | None = None, target: Vector3 | None = None) -> None:
        """Move every living enemy by the time elapsed since its last update."""
        if self._disposed:
            return
        if now is None:
            now = self._clock()
        for enemy in self._enemies:
            if not enemy.alive:
                continue
            dt = now - enemy.last_update
            enemy.pos = step_enemy(enemy, dt, self._bounds, self._config, target)
            enemy.last_update = now

    def prune_expired(self, now: float | None = None) -> PruneReport:
        """Drop dead enemies and expired cache entries."""
        if now is None:
            now = self._clock()
        self._last_prune = now
        dead = [e for e in self._enemies if e.health <= 0]
        if dead:
            # In place, so callers holding the live list see the removal
            self._enemies[:] = [e for e in self._enemies if e.health > 0]
            for enemy in dead:
                try:
                    self._scene.remove_from_scene(enemy.handle)
                except Exception as exc:
                    self._reporter.report(exc, "prune_expired")
        purged = self._cache.purge_expired(now)
        if dead or purged:
            logger.debug("Pruned %d dead enemies, %d cache entries", len(dead), purged)
        return PruneReport(len(dead), purged)

    def maintain(self, now: float | None = None) -> PruneReport | None:
        """Run the prune pass if its interval has elapsed."""
        if self._disposed:
            return None
        if now is None:
            now = self._clock()
        if now - self._last_prune < self._config.prune_interval:
            return None
        return self.prune_expired(now)

    def dispose(self) -> None:
        """Remove every handle from the scene and forget all entities."""
        if self._disposed:
            return
        self._disposed = True
        for entity in [*self._enemies, *self._structures]:
            try:
                self._scene.remove_from_scene(entity.handle)
            except Exception as exc:
                self._reporter.report(exc, "dispose")
        self._enemies.clear()
        self._structures.clear()
