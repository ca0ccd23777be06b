"""Sound effect channels, music streaming and software mixing."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from rsdkv4.gameconfig import GameConfig, normalise_sfx_name
from rsdkv4.mixing import MAX_VOLUME, clamp_samples, expand_mono_to_stereo, mix_into

_log = logging.getLogger(__name__)

TRACK_COUNT = 0x10
SFX_COUNT = 0x100
CHANNEL_COUNT = 0x10
MIX_BUFFER_SAMPLES = 256

_MUSIC_DIR = "Data/Music/"
_SFX_DIR = "Data/SoundFX/"
_RATIO_SCALE = 0.0001

SoundLoader = Callable[[str], Optional[Sequence[int]]]


class MusicStatus(enum.IntEnum):
    STOPPED = 0
    PLAYING = 1
    PAUSED = 2
    LOADING = 3
    READY = 4


@dataclass
class TrackInfo:
    file_name: str = ""
    track_loop: bool = False
    loop_point: int = 0


@dataclass
class SfxInfo:
    name: str = ""
    buffer: Tuple[int, ...] = ()
    length: int = 0
    loaded: bool = False


@dataclass
class Channel:
    """A playing sound effect: which one, how far through and how it sounds."""

    sample_length: int = 0
    sample_pos: int = 0
    sfx_id: int = -1
    loop: bool = False
    pan: int = 0


@dataclass
class _MusicStream:
    samples: Tuple[int, ...]
    track_loop: bool
    loop_point: int
    position: int = 0

    @property
    def frame_count(self) -> int:
        return len(self.samples) // 2

    @property
    def frame_position(self) -> int:
        return self.position // 2

    def seek(self, frame: int) -> None:
        self.position = min(frame * 2, len(self.samples))


class AudioEngine:
    """Mixes up to CHANNEL_COUNT sound effects and one music track.

    sound_loader receives a data path and returns the file's decoded signed
    16-bit samples, or None when the file does not exist. Sound effects are
    mono; music is interleaved stereo. The loader may raise ValueError or
    OSError for a file it cannot decode.
    """

    def __init__(self, sound_loader: SoundLoader) -> None:
        self._sound_loader = sound_loader
        self.audio_enabled = True
        self.master_volume = MAX_VOLUME
        self.sfx_volume = MAX_VOLUME
        self.bgm_volume = MAX_VOLUME
        self.music_status = MusicStatus.STOPPED
        self.music_start_pos = 0
        self.music_ratio = 0
        self.track_id = -1
        self.track_buffer = -1
        self.global_sfx_count = 0
        self.stage_sfx_count = 0
        self.tracks: List[TrackInfo] = [TrackInfo() for _ in range(TRACK_COUNT)]
        self.sfx: List[SfxInfo] = [SfxInfo() for _ in range(SFX_COUNT)]
        self.sfx_names: List[str] = [""] * SFX_COUNT
        self.channels: List[Channel] = [Channel() for _ in range(CHANNEL_COUNT)]
        self._music: Optional[_MusicStream] = None

    # Sound effects

    def load_global_sfx(self, config: GameConfig) -> None:
        """Name and load every sound listed in a game configuration."""
        count = len(config.sfx_names)
        if count > SFX_COUNT:
            raise ValueError(f"too many sound effects: {count}")
        self.global_sfx_count = count
        for sfx_id, name in enumerate(config.sfx_names):
            self.set_sfx_name(name, sfx_id)
        for sfx_id, path in enumerate(config.sfx_paths):
            self.load_sfx(path, sfx_id)
        for channel in self.channels:
            channel.sfx_id = -1

    def set_sfx_name(self, name: str, sfx_id: int) -> None:
        self.sfx_names[sfx_id] = normalise_sfx_name(name)
        _log.debug("Set SFX (%d) name to: %s", sfx_id, name)

    def load_sfx(self, file_path: str, sfx_id: int) -> None:
        """Load a .wav or .ogg sound effect into slot sfx_id."""
        if not self.audio_enabled:
            return
        full_path = _SFX_DIR + file_path
        kind = full_path[-3:-2].lower()
        if kind not in ("w", "o"):
            raise ValueError(f"sfx format not supported: {file_path}")
        samples = self._sound_loader(full_path)
        if samples is None:
            return
        buffer = tuple(samples)
        self.sfx[sfx_id] = SfxInfo(name=file_path, buffer=buffer, length=len(buffer), loaded=True)

    def play_sfx(self, sfx_id: int, loop: bool) -> None:
        """Start sfx_id on its current channel or the first free one."""
        # With every channel busy the last one is taken over.
        index = next(
            (i for i, ch in enumerate(self.channels) if ch.sfx_id in (sfx_id, -1)),
            CHANNEL_COUNT - 1,
        )
        info = self.sfx[sfx_id]
        self.channels[index] = Channel(
            sample_length=info.length, sample_pos=0, sfx_id=sfx_id, loop=bool(loop), pan=0
        )

    def stop_sfx(self, sfx_id: int) -> None:
        for index, channel in enumerate(self.channels):
            if channel.sfx_id == sfx_id:
                self.channels[index] = Channel()

    def stop_all_sfx(self) -> None:
        for channel in self.channels:
            channel.sfx_id = -1

    def set_sfx_attributes(self, sfx_id: int, loop_count: int, pan: int) -> None:
        """Change looping and pan of a playing sound; -1 keeps the loop setting."""
        channel = next((ch for ch in self.channels if ch.sfx_id == sfx_id), None)
        if channel is None:
            return
        if loop_count != -1:
            channel.loop = loop_count != 0
        channel.pan = pan

    def _find_named(self, name: str) -> Optional[int]:
        for sfx_id in range(self.global_sfx_count + self.stage_sfx_count):
            if self.sfx_names[sfx_id] == name:
                return sfx_id
        return None

    def play_sfx_by_name(self, name: str, loop: bool) -> bool:
        sfx_id = self._find_named(name)
        if sfx_id is None:
            return False
        self.play_sfx(sfx_id, loop)
        return True

    def stop_sfx_by_name(self, name: str) -> bool:
        sfx_id = self._find_named(name)
        if sfx_id is None:
            return False
        self.stop_sfx(sfx_id)
        return True

    def _release_range(self, ids: range) -> None:
        for sfx_id in reversed(ids):
            if self.sfx[sfx_id].loaded:
                self.sfx[sfx_id] = SfxInfo()
                self.sfx_names[sfx_id] = ""

    def release_global_sfx(self) -> None:
        self._release_range(range(self.global_sfx_count))
        self.global_sfx_count = 0

    def release_stage_sfx(self) -> None:
        start = self.global_sfx_count
        self._release_range(range(start, start + self.stage_sfx_count))
        self.stage_sfx_count = 0

    # Music

    def set_music_track(self, file_path: str, track_id: int, loop: bool, loop_point: int) -> None:
        if not 0 <= track_id < TRACK_COUNT:
            raise IndexError(f"music track out of range: {track_id}")
        self.tracks[track_id] = TrackInfo(_MUSIC_DIR + file_path, bool(loop), loop_point)

    def swap_music_track(self, file_path: str, track_id: int, loop_point: int, ratio: int) -> None:
        """Switch to another track, carrying the position over scaled by ratio/10000."""
        if not file_path:
            self.stop_music(True)
            return
        self.set_music_track(file_path, track_id, True, loop_point)
        self.music_ratio = ratio
        self.play_music(track_id, 1)

    def play_music(self, track: int, start_pos: int) -> bool:
        if not self.audio_enabled:
            return False
        if self.music_status == MusicStatus.LOADING:
            _log.warning("music tried to play while music was loading")
            return False
        self.music_start_pos = start_pos
        if not 0 <= track < TRACK_COUNT:
            self.stop_music(True)
            self.track_buffer = -1
            return False
        self.track_buffer = track
        self.music_status = MusicStatus.LOADING
        self.load_music()
        return True

    def load_music(self) -> None:
        """Open the track queued by play_music and start it playing."""
        if not 0 <= self.track_buffer < TRACK_COUNT:
            self.stop_music(True)
            return
        track = self.tracks[self.track_buffer]
        if not track.file_name:
            self.stop_music(True)
            return

        old_pos = 0
        if self._music is not None:
            old_pos = self._music.frame_position
            self.stop_music(False)

        try:
            samples = self._sound_loader(track.file_name)
        except (ValueError, OSError) as exc:
            self.music_status = MusicStatus.STOPPED
            _log.error("failed to load music %s: %s", track.file_name, exc)
            return
        if samples is None:
            return

        stream = _MusicStream(tuple(samples), track.track_loop, track.loop_point)
        if self.music_start_pos:
            new_pos = old_pos * (self.music_ratio * _RATIO_SCALE)
            total = stream.frame_count
            self.music_start_pos = int(math.fmod(new_pos, total)) if total else 0
            stream.seek(self.music_start_pos)
        self.music_start_pos = 0
        self._music = stream

        self.music_status = MusicStatus.PLAYING
        self.master_volume = MAX_VOLUME
        self.track_id = self.track_buffer
        self.track_buffer = -1

    def stop_music(self, set_status: bool) -> None:
        if set_status:
            self.music_status = MusicStatus.STOPPED
        self._music = None

    def pause_sound(self) -> None:
        if self.music_status == MusicStatus.PLAYING:
            self.music_status = MusicStatus.PAUSED

    def resume_sound(self) -> None:
        if self.music_status == MusicStatus.PAUSED:
            self.music_status = MusicStatus.PLAYING

    def set_music_volume(self, volume: int) -> None:
        self.master_volume = max(0, min(MAX_VOLUME, volume))

    # Mixing

    def _mix_music(self, mix: List[int], wanted: int) -> None:
        stream = self._music
        if stream is None:
            return
        if self.music_status not in (MusicStatus.PLAYING, MusicStatus.READY):
            return
        gathered: List[int] = []
        while len(gathered) < wanted:
            chunk = stream.samples[stream.position:stream.position + wanted - len(gathered)]
            if not chunk:
                loop_start = stream.loop_point * 2
                if stream.track_loop and loop_start < len(stream.samples):
                    stream.position = loop_start
                    continue
                self.music_status = MusicStatus.STOPPED
                break
            gathered.extend(chunk)
            stream.position += len(chunk)
        if gathered:
            mix_into(mix, gathered, (self.bgm_volume * self.master_volume) // MAX_VOLUME, 0)

    def _mix_channel(self, mix: List[int], index: int, wanted: int) -> None:
        channel = self.channels[index]
        info = self.sfx[channel.sfx_id]
        if not info.buffer:
            return
        buffer = [0] * wanted
        done = 0
        while done != wanted:
            count = min(channel.sample_length * 2, wanted - done)
            half = count // 2
            start = channel.sample_pos
            buffer[done:done + half * 2] = expand_mono_to_stereo(info.buffer[start:start + half])
            done += count
            channel.sample_pos += half
            channel.sample_length -= half
            if channel.sample_length == 0:
                if channel.loop:
                    channel.sample_pos = 0
                    channel.sample_length = info.length
                else:
                    self.stop_sfx(channel.sfx_id)
                    break
        mix_into(mix, buffer[:done], self.sfx_volume, self.channels[index].pan)

    def render(self, sample_count: int) -> List[int]:
        """Produce sample_count interleaved stereo samples of mixed output."""
        if not self.audio_enabled:
            return [0] * sample_count
        output: List[int] = []
        remaining = sample_count
        while remaining:
            wanted = min(remaining, MIX_BUFFER_SAMPLES)
            mix = [0] * wanted
            self._mix_music(mix, wanted)
            for index in range(CHANNEL_COUNT):
                if self.channels[index].sfx_id >= 0:
                    self._mix_channel(mix, index, wanted)
            output.extend(clamp_samples(mix))
            remaining -= wanted
        return output

    def release(self) -> None:
        """Stop everything and unload every sound effect."""
        self.stop_music(True)
        self.stop_all_sfx()
        self.release_stage_sfx()
        self.release_global_sfx()