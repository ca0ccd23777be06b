"""Parsing of the game configuration file's header, variables and sound list."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import List, Tuple

PALETTE_ENTRY_COUNT = 0x60

_INT32 = struct.Struct("<i")


class GameConfigError(ValueError):
    """Raised when a game configuration file is malformed."""


@dataclass
class GameConfig:
    """The contents of a game configuration file up to its sound list."""

    title: str = ""
    description: str = ""
    palette: List[Tuple[int, int, int]] = field(default_factory=list)
    object_names: List[str] = field(default_factory=list)
    script_paths: List[str] = field(default_factory=list)
    global_variables: List[Tuple[str, int]] = field(default_factory=list)
    sfx_names: List[str] = field(default_factory=list)
    sfx_paths: List[str] = field(default_factory=list)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise GameConfigError("game configuration is truncated")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def i32(self) -> int:
        return _INT32.unpack(self.take(4))[0]

    def text(self) -> str:
        return self.take(self.u8()).decode("latin-1")


def parse_game_config(data: bytes) -> GameConfig:
    """Parse the bytes of a game configuration file."""
    reader = _Reader(data)
    config = GameConfig()
    config.title = reader.text()
    config.description = reader.text()
    config.palette = [tuple(reader.take(3)) for _ in range(PALETTE_ENTRY_COUNT)]

    object_count = reader.u8()
    config.object_names = [reader.text() for _ in range(object_count)]
    config.script_paths = [reader.text() for _ in range(object_count)]

    var_count = reader.u8()
    for _ in range(var_count):
        name = reader.text()
        config.global_variables.append((name, reader.i32()))

    sfx_count = reader.u8()
    config.sfx_names = [reader.text() for _ in range(sfx_count)]
    config.sfx_paths = [reader.text() for _ in range(sfx_count)]
    return config


def normalise_sfx_name(name: str) -> str:
    """Return a sound name with its spaces removed, as names are looked up."""
    return name.replace(" ", "")