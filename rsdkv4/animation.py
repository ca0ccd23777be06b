"""Sprite animation files: loading, lookup and per-entity frame stepping."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional

ANIFILE_COUNT = 0x100
ANIMATION_COUNT = 0x400
SPRITEFRAME_COUNT = 0x1000
HITBOX_COUNT = 0x20
HITBOX_DIR_COUNT = 0x8

_SHEET_SLOT_COUNT = 0x18
_ANIMATION_DIR = "Data/Animations/"
_MAX_ANIMATION_SPEED = 0xF0


class AnimationError(ValueError):
    """Raised when an animation file is malformed or a table is full."""


class RotationFlag(enum.IntEnum):
    NONE = 0
    FULL = 1
    DEG45 = 2
    STATIC_FRAMES = 3


@dataclass
class SpriteFrame:
    spr_x: int = 0
    spr_y: int = 0
    width: int = 0
    height: int = 0
    pivot_x: int = 0
    pivot_y: int = 0
    sheet_id: int = 0
    hitbox_id: int = 0


@dataclass
class SpriteAnimation:
    name: str = ""
    frame_count: int = 0
    speed: int = 0
    loop_point: int = 0
    rotation_flag: int = RotationFlag.NONE
    frame_list_offset: int = 0


def _direction_list() -> List[int]:
    return [0] * HITBOX_DIR_COUNT


@dataclass
class Hitbox:
    left: List[int] = field(default_factory=_direction_list)
    top: List[int] = field(default_factory=_direction_list)
    right: List[int] = field(default_factory=_direction_list)
    bottom: List[int] = field(default_factory=_direction_list)


@dataclass
class AnimationFile:
    file_name: str = ""
    anim_count: int = 0
    ani_list_offset: int = 0
    hitbox_list_offset: int = 0


@dataclass
class AnimatedEntity:
    """The animation state an entity carries between frames."""

    animation: int = 0
    prev_animation: int = 0
    frame: int = 0
    animation_speed: int = 0
    animation_timer: int = 0


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise AnimationError("animation file is truncated")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def s8(self) -> int:
        value = self.u8()
        return value - 0x100 if value >= 0x80 else value

    def text(self) -> str:
        return self.take(self.u8()).decode("latin-1")


class AnimationBank:
    """Holds every loaded animation file, animation, frame and hitbox."""

    def __init__(self, sheet_loader: Callable[[str], int]) -> None:
        self._sheet_loader = sheet_loader
        self.files: List[AnimationFile] = []
        self.animations: List[SpriteAnimation] = []
        self.frames: List[SpriteFrame] = []
        self.hitboxes: List[Hitbox] = []
        self.script_frames: List[SpriteFrame] = []

    def load_animation_file(self, data: bytes) -> AnimationFile:
        """Parse an animation file, append its contents and describe where they went.

        The returned file is not registered under a name; see add_animation_file.
        """
        reader = _Reader(data)

        sheet_ids = [0] * _SHEET_SLOT_COUNT
        sheet_count = reader.u8()
        if sheet_count > _SHEET_SLOT_COUNT:
            raise AnimationError(f"too many sprite sheets: {sheet_count}")
        for slot in range(sheet_count):
            name = reader.text()
            if name:
                sheet_ids[slot] = self._sheet_loader(name)

        new_animations: List[SpriteAnimation] = []
        new_frames: List[SpriteFrame] = []
        anim_count = reader.u8()
        for _ in range(anim_count):
            anim = SpriteAnimation(frame_list_offset=len(self.frames) + len(new_frames))
            anim.name = reader.text()
            anim.frame_count = reader.u8()
            anim.speed = reader.u8()
            anim.loop_point = reader.u8()
            anim.rotation_flag = reader.u8()
            for _ in range(anim.frame_count):
                slot = reader.u8()
                if slot >= _SHEET_SLOT_COUNT:
                    raise AnimationError(f"sheet slot out of range: {slot}")
                frame = SpriteFrame(sheet_id=sheet_ids[slot])
                frame.hitbox_id = reader.u8()
                frame.spr_x = reader.u8()
                frame.spr_y = reader.u8()
                frame.width = reader.u8()
                frame.height = reader.u8()
                frame.pivot_x = reader.s8()
                frame.pivot_y = reader.s8()
                new_frames.append(frame)
            # Extra frames hold pre-rotated copies and are not stepped through.
            if anim.rotation_flag == RotationFlag.STATIC_FRAMES:
                anim.frame_count >>= 1
            new_animations.append(anim)

        new_hitboxes: List[Hitbox] = []
        for _ in range(reader.u8()):
            hitbox = Hitbox()
            for d in range(HITBOX_DIR_COUNT):
                hitbox.left[d] = reader.s8()
                hitbox.top[d] = reader.s8()
                hitbox.right[d] = reader.s8()
                hitbox.bottom[d] = reader.s8()
            new_hitboxes.append(hitbox)

        if len(self.animations) + len(new_animations) > ANIMATION_COUNT:
            raise AnimationError("animation table is full")
        if len(self.frames) + len(new_frames) > SPRITEFRAME_COUNT:
            raise AnimationError("sprite frame table is full")
        if len(self.hitboxes) + len(new_hitboxes) > HITBOX_COUNT:
            raise AnimationError("hitbox table is full")

        anim_file = AnimationFile(
            anim_count=anim_count,
            ani_list_offset=len(self.animations),
            hitbox_list_offset=len(self.hitboxes),
        )
        self.animations.extend(new_animations)
        self.frames.extend(new_frames)
        self.hitboxes.extend(new_hitboxes)
        return anim_file

    def add_animation_file(
        self, file_name: str, read_file: Callable[[str], Optional[bytes]]
    ) -> AnimationFile:
        """Return the file registered under file_name, loading it on first use.

        read_file receives the full data path and returns the file's bytes,
        or None when it does not exist; a missing file is still registered,
        empty.
        """
        for anim_file in self.files:
            if anim_file.file_name == file_name:
                return anim_file
        if len(self.files) >= ANIFILE_COUNT:
            raise AnimationError("animation file table is full")

        data = read_file(_ANIMATION_DIR + file_name)
        if data is None:
            anim_file = AnimationFile()
        else:
            anim_file = self.load_animation_file(data)
        anim_file.file_name = file_name
        self.files.append(anim_file)
        return anim_file

    def animation(self, anim_file: AnimationFile, index: int) -> SpriteAnimation:
        """Return the index-th animation of anim_file."""
        if not 0 <= index < anim_file.anim_count:
            raise IndexError(f"animation index out of range: {index}")
        return self.animations[anim_file.ani_list_offset + index]

    def clear(self) -> None:
        """Forget every loaded file, animation, frame and hitbox."""
        self.files.clear()
        self.animations.clear()
        self.frames.clear()
        self.hitboxes.clear()
        self.script_frames.clear()


def process_object_animation(animation: SpriteAnimation, entity: AnimatedEntity) -> None:
    """Advance entity's animation timer and frame by one game tick."""
    if entity.animation_speed <= 0:
        entity.animation_timer += animation.speed
    else:
        if entity.animation_speed > _MAX_ANIMATION_SPEED:
            entity.animation_speed = _MAX_ANIMATION_SPEED
        entity.animation_timer += entity.animation_speed

    if entity.animation != entity.prev_animation:
        entity.prev_animation = entity.animation
        entity.frame = 0
        entity.animation_timer = 0
        entity.animation_speed = 0

    if entity.animation_timer > _MAX_ANIMATION_SPEED - 1:
        entity.animation_timer -= _MAX_ANIMATION_SPEED
        entity.frame += 1

    if entity.frame >= animation.frame_count:
        entity.frame = animation.loop_point