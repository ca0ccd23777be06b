import struct

import pytest

from rsdkv4.animation import (
    HITBOX_DIR_COUNT,
    AnimatedEntity,
    AnimationBank,
    AnimationError,
    RotationFlag,
    SpriteAnimation,
    process_object_animation,
)


def _text(s):
    raw = s.encode("latin-1")
    return bytes([len(raw)]) + raw


def build_ani(sheets, anims, hitboxes=()):
    out = bytearray([len(sheets)])
    for name in sheets:
        out += _text(name)
    out.append(len(anims))
    for name, speed, loop, rot, frames in anims:
        out += _text(name)
        out += bytes([len(frames), speed, loop, rot])
        for sheet, hb, x, y, w, h, px, py in frames:
            out += bytes([sheet, hb, x, y, w, h]) + struct.pack("bb", px, py)
    out.append(len(hitboxes))
    for box in hitboxes:
        for left, top, right, bottom in box:
            out += struct.pack("bbbb", left, top, right, bottom)
    return bytes(out)


class SheetRecorder:
    def __init__(self):
        self.names = []

    def __call__(self, name):
        self.names.append(name)
        return 10 + len(self.names)


FRAME_A = (1, 2, 3, 4, 5, 6, -7, -8)
FRAME_B = (0, 0, 9, 10, 11, 12, 13, 14)


def sample_file():
    box = [(-1, -2, 3, 4)] * HITBOX_DIR_COUNT
    return build_ani(
        ["a.gif", "b.gif"],
        [("Walk", 6, 1, RotationFlag.FULL, [FRAME_A, FRAME_B])],
        [box],
    )


def test_load_reads_frames_and_maps_sheets():
    loader = SheetRecorder()
    bank = AnimationBank(loader)
    anim_file = bank.load_animation_file(sample_file())
    assert loader.names == ["a.gif", "b.gif"]
    assert anim_file.anim_count == 1
    anim = bank.animation(anim_file, 0)
    assert anim.name == "Walk"
    assert (anim.frame_count, anim.speed, anim.loop_point) == (2, 6, 1)
    first = bank.frames[anim.frame_list_offset]
    assert first.sheet_id == loader(  # slot 1 maps to the second sheet loaded
        "probe"
    ) - 1
    assert (first.hitbox_id, first.spr_x, first.spr_y) == (2, 3, 4)
    assert (first.width, first.height) == (5, 6)
    assert (first.pivot_x, first.pivot_y) == (-7, -8)


def test_hitboxes_are_signed():
    bank = AnimationBank(SheetRecorder())
    anim_file = bank.load_animation_file(sample_file())
    box = bank.hitboxes[anim_file.hitbox_list_offset]
    assert box.left == [-1] * HITBOX_DIR_COUNT
    assert box.top == [-2] * HITBOX_DIR_COUNT
    assert box.right == [3] * HITBOX_DIR_COUNT
    assert box.bottom == [4] * HITBOX_DIR_COUNT


def test_static_frames_halves_frame_count():
    data = build_ani([], [("Spin", 1, 0, RotationFlag.STATIC_FRAMES, [FRAME_B] * 4)])
    bank = AnimationBank(SheetRecorder())
    anim_file = bank.load_animation_file(data)
    assert bank.animation(anim_file, 0).frame_count == 2
    assert len(bank.frames) == 4


def test_offsets_accumulate_across_files():
    bank = AnimationBank(SheetRecorder())
    first = bank.load_animation_file(sample_file())
    second = bank.load_animation_file(sample_file())
    assert second.ani_list_offset == first.ani_list_offset + first.anim_count
    assert second.hitbox_list_offset == first.hitbox_list_offset + 1
    assert bank.animation(second, 0).frame_list_offset == 2


def test_truncated_file_raises_and_leaves_bank_untouched():
    bank = AnimationBank(SheetRecorder())
    with pytest.raises(AnimationError):
        bank.load_animation_file(sample_file()[:-5])
    assert bank.animations == []
    assert bank.frames == []


def test_add_animation_file_caches_by_name():
    requested = []

    def read_file(path):
        requested.append(path)
        return sample_file()

    bank = AnimationBank(SheetRecorder())
    first = bank.add_animation_file("Player.ani", read_file)
    again = bank.add_animation_file("Player.ani", read_file)
    assert again is first
    assert requested == ["Data/Animations/Player.ani"]
    assert first.file_name == "Player.ani"


def test_missing_file_is_registered_empty():
    bank = AnimationBank(SheetRecorder())
    anim_file = bank.add_animation_file("Gone.ani", lambda path: None)
    assert anim_file.anim_count == 0
    assert bank.files == [anim_file]
    with pytest.raises(IndexError):
        bank.animation(anim_file, 0)


def test_clear_empties_everything():
    bank = AnimationBank(SheetRecorder())
    bank.add_animation_file("Player.ani", lambda path: sample_file())
    bank.clear()
    assert (bank.files, bank.animations, bank.frames, bank.hitboxes) == ([], [], [], [])


def test_process_uses_animation_speed_when_entity_speed_unset():
    anim = SpriteAnimation(frame_count=3, speed=0xF0, loop_point=0)
    entity = AnimatedEntity()
    process_object_animation(anim, entity)
    assert entity.frame == 1
    assert entity.animation_timer == 0


def test_process_caps_entity_speed():
    anim = SpriteAnimation(frame_count=3, speed=1)
    entity = AnimatedEntity(animation_speed=0x1FF)
    process_object_animation(anim, entity)
    assert entity.animation_speed == 0xF0
    assert entity.frame == 1


def test_process_resets_on_animation_change():
    anim = SpriteAnimation(frame_count=3, speed=0xF0)
    entity = AnimatedEntity(animation=2, prev_animation=1, frame=2, animation_timer=50)
    process_object_animation(anim, entity)
    assert entity.prev_animation == 2
    assert entity.frame == 0
    assert entity.animation_timer == 0


def test_process_wraps_to_loop_point():
    anim = SpriteAnimation(frame_count=3, speed=0xF0, loop_point=1)
    entity = AnimatedEntity(frame=2)
    process_object_animation(anim, entity)
    assert entity.frame == 1