import io
import struct

import pytest

from rsdkv4.wav import load_wav


def make_wav(samples, bits=16, channels=1, rate=44100):
    block = channels * bits // 8
    header = struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + len(samples),
        b"WAVE",
        b"fmt ",
        16,
        1,
        channels,
        rate,
        rate * block,
        block,
        bits,
        b"data",
        len(samples),
    )
    return io.BytesIO(header + samples)


def test_sixteen_bit_data_is_kept_verbatim():
    payload = struct.pack("<4h", 1, -1, 1000, -1000)
    wav = load_wav(make_wav(payload, channels=2, rate=22050))
    assert wav.data == payload
    assert wav.size == len(payload)
    assert wav.bits_per_sample == 16
    assert wav.num_channels == 2
    assert wav.sample_rate == 22050


def test_eight_bit_data_is_widened():
    wav = load_wav(make_wav(bytes([0x80, 0x00, 0xFF]), bits=8))
    assert wav.bits_per_sample == 16
    assert wav.size == 6
    assert struct.unpack("<3h", wav.data) == (0, -32768, 32512)


def test_eight_bit_widening_preserves_order():
    raw = bytes(range(0, 256, 17))
    wav = load_wav(make_wav(raw, bits=8))
    values = struct.unpack(f"<{len(raw)}h", wav.data)
    assert list(values) == sorted(values)
    assert len(values) == len(raw)


def test_short_header_raises():
    with pytest.raises(ValueError):
        load_wav(io.BytesIO(b"RIFF\x00\x00"))


def test_short_data_raises():
    stream = make_wav(bytes(8))
    truncated = io.BytesIO(stream.getvalue()[:-3])
    with pytest.raises(ValueError):
        load_wav(truncated)