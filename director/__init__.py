"""Procedural-population director: what to spawn, where, and when."""

from director.config import DirectorConfig
from director.engine.director import Director

__all__ = ["Director", "DirectorConfig"]
