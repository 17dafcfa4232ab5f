"""Director configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DirectorConfig:
    """Immutable configuration for the procedural-population director."""

    # World
    world_seed: int = 42
    world_half_extent: float = 250.0     # Play area is [-extent, extent] on x and z
    fallback_margin: float = 10.0        # Fallback spawn sits this far outside the perimeter

    # Models
    enemy_model_name: str = "enemy-selection-model"
    structure_model_name: str = "structure-placement-model"
    model_dir: str = "models"

    # Inference cache
    cache_ttl_seconds: float = 5.0
    cache_capacity: int = 100
    cache_quantum: float = 0.05          # Normalized features are rounded to this step

    # Planner
    planner_max_attempts: int = 10
    enemy_min_separation: float = 5.0
    structure_clearance: float = 2.0     # Added to 3 x max(width, depth)

    # Enemies
    max_enemies: int = 50
    max_spawn_per_call: int = 3
    fast_threshold: float = 0.5
    health_per_level: int = 50
    damage_per_level: int = 5
    speed_per_level: float = 10.0
    speed_base: float = 10.0

    # Movement
    chase_scale: float = 0.25            # Fraction of speed applied per second when chasing
    zigzag_scale: float = 0.1
    zigzag_period: float = 0.5

    # Structures
    structure_coord_range: float = 100.0  # Denormalized x/z span, centred on 0
    max_structure_density_count: int = 200

    # Maintenance
    prune_interval: float = 5.0

    # Tasks
    task_target_per_level: int = 2
    task_reward_per_level: int = 50

    # Game loop
    frame_dt: float = 1.0 / 60.0
    max_frames: int = 20000
    enemy_spawn_chance: float = 0.01
    structure_spawn_chance: float = 0.005
    score_per_level: int = 50
    score_per_kill: int = 10
    player_damage_per_frame: int = 5
    player_attack_range: float = 25.0

    # Logging
    log_level: str = "INFO"
