"""Sample-level mixing helpers for 16-bit stereo PCM."""

from __future__ import annotations

import struct
from typing import Iterable, List, MutableSequence, Sequence

MAX_VOLUME = 100
SAMPLE_MAX = (1 << 15) - 1
SAMPLE_MIN = -(1 << 15)

_F32 = struct.Struct("<f")


def _f32(value: float) -> float:
    """Round value to single precision."""
    return _F32.unpack(_F32.pack(value))[0]


def _div_trunc(numerator: int, denominator: int) -> int:
    """Integer division that truncates toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def _pan_gains(pan: int) -> tuple[float, float]:
    if pan < 0:
        return 1.0, _f32(1.0 - abs(_f32(pan / 100.0)))
    if pan > 0:
        return _f32(1.0 - abs(_f32(pan / 100.0))), 1.0
    return 0.0, 0.0


def mix_into(
    dst: MutableSequence[int], src: Sequence[int], volume: int, pan: int
) -> None:
    """Add src, scaled by volume and panned, onto dst in place.

    Samples are interleaved stereo: even indices are the left channel,
    odd indices the right. Volume is clamped to MAX_VOLUME; a volume of
    zero leaves dst untouched. Pan runs from -100 (left) to 100 (right).
    """
    if len(src) > len(dst):
        raise ValueError("source is longer than the mix buffer")
    if volume == 0:
        return
    volume = min(volume, MAX_VOLUME)
    pan_l, pan_r = _pan_gains(pan)

    for i, value in enumerate(src):
        sample = _div_trunc(value * volume, MAX_VOLUME)
        if pan != 0:
            gain = pan_r if i % 2 else pan_l
            sample = int(_f32(_f32(float(sample)) * gain))
        dst[i] += sample


def clamp_samples(samples: Iterable[int]) -> List[int]:
    """Clamp mixed samples back into the signed 16-bit range."""
    return [max(SAMPLE_MIN, min(SAMPLE_MAX, sample)) for sample in samples]


def expand_mono_to_stereo(samples: Iterable[int]) -> List[int]:
    """Duplicate every mono sample into a left/right pair."""
    stereo: List[int] = []
    for sample in samples:
        stereo.extend((sample, sample))
    return stereo