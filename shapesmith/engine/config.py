"""Engine configuration: geometry constants shared by processors."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Defaults and tessellation resolution for the geometry engine."""

    # Shape contract defaults
    default_width: float = 100.0
    default_height: float = 100.0
    default_radius: float = 50.0
    default_polygon_sides: int = 6

    # Tessellation
    ellipse_segments: int = 32  # boolean engine circles/ellipses
    circle_path_segments: int = 64  # circle -> editable path

    # Polygon cache
    polygon_cache_capacity: int = 512

    # Simplify: turn angle below this counts as a corner (degrees)
    simplify_corner_angle: float = 60.0

    # Noise: handle displacement relative to the anchor, and seed offsets
    noise_handle_factor: float = 0.3
    noise_cp1_seed_offset: int = 1000
    noise_cp2_seed_offset: int = 2000

    # L-system: per-level reseed stride
    lsystem_level_seed_stride: int = 997

    # Boolean result style fallbacks
    default_color: str = "#000000"
    default_stroke_width: float = 2.0
    default_dash: str = "solid"


DEFAULT_CONFIG = EngineConfig()
