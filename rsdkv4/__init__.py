"""Sprite animation, WAV reading, game configuration parsing and audio mixing for a retro 2D game engine."""

__version__ = "0.1.0"
__all__ = ["animation", "wav", "mixing", "gameconfig", "audio"]