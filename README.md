# rsdkv4

The animation and audio core of a retro 2D game engine. It is written in plain
Python and has no third-party dependencies.

## Modules

### `rsdkv4.animation`

`AnimationBank` holds every loaded animation file, animation, sprite frame and
hitbox.

- `AnimationBank(sheet_loader)`: `sheet_loader` is called with each
  sprite-sheet name that a file lists, and must return the sheet's id.
- `load_animation_file(data)` parses the bytes of a binary animation file. It
  appends the file's animations, frames and hitboxes to the bank and returns
  an `AnimationFile` that records where they were placed.
- `add_animation_file(file_name, read_file)` returns the file already
  registered under `file_name`. If there is none, it calls
  `read_file("Data/Animations/" + file_name)`, loads the result and registers
  it. When `read_file` returns `None`, the name is still registered, with an
  empty file.
- `animation(anim_file, index)` returns a `SpriteAnimation`.
- `clear()` forgets everything in the bank.

`process_object_animation(animation, entity)` advances an `AnimatedEntity` by
one tick. The entity's own `animation_speed` is used when it is positive and
is capped at `0xF0`; otherwise the animation's `speed` is used. When the
entity has switched animation, its frame, timer and speed are reset. When the
frame runs past the end, it goes back to `loop_point`.

For animations flagged `RotationFlag.STATIC_FRAMES`, the frame count is
halved, because the second half holds pre-rotated frames.

`AnimationError` (a `ValueError`) is raised for truncated files, sheet slots
out of range and full tables. The limits are 0x100 files, 0x400 animations,
0x1000 frames and 0x20 hitboxes.

### `rsdkv4.wav`

`load_wav(stream)` reads a WAVE file with a canonical 44-byte header from a
binary stream and returns a `WavData`, which holds `sample_rate`, `size`,
`bits_per_sample`, `num_channels` and `data`. Samples are returned as raw
bytes. 8-bit samples are widened to signed 16-bit little-endian. A truncated
header or truncated sample data raises `ValueError`.

### `rsdkv4.mixing`

- `mix_into(dst, src, volume, pan)` adds `src` onto `dst` in place. Samples
  are interleaved stereo. `volume` is clamped to 100, and a volume of 0 does
  nothing. `pan` runs from -100 (left) to 100 (right).
- `clamp_samples(samples)` clamps a mix back into the signed 16-bit range.
- `expand_mono_to_stereo(samples)` duplicates each sample into a left/right
  pair.

### `rsdkv4.gameconfig`

`parse_game_config(data)` reads a game configuration file into a `GameConfig`.
It reads the following fields:

- title and description
- a 0x60-entry RGB palette
- object names and script paths
- global variables as name/value pairs
- sound-effect names and paths

Malformed data raises `GameConfigError`. `normalise_sfx_name(name)` removes
spaces from a name, in the same way that sound names are stored for lookup.

### `rsdkv4.audio`

`AudioEngine(sound_loader)` mixes up to 16 sound-effect channels and one
music track. `sound_loader` is called with a data path and returns decoded
signed 16-bit samples, or `None` if the file does not exist. Sound effects
are mono; music is interleaved stereo.

Sound effects:

- `load_global_sfx(config)` names and loads the sound effects listed in a
  `GameConfig`.
- `load_sfx(path, sfx_id)` loads a sound from under `Data/SoundFX/`. Only
  `.wav` and `.ogg` names are accepted.
- `play_sfx`, `stop_sfx`, `stop_all_sfx`, `set_sfx_attributes`,
  `play_sfx_by_name`, `stop_sfx_by_name`, `release_global_sfx` and
  `release_stage_sfx` control playback and unloading.

Music:

- `set_music_track` registers a track under `Data/Music/`.
- `play_music` starts a track. It loads the track straight away through
  `load_music`.
- `swap_music_track` switches track and carries the playback position over,
  scaled by `ratio / 10000`.
- `stop_music`, `pause_sound`, `resume_sound` and `set_music_volume` control
  playback. The possible states are listed in `MusicStatus`.

`render(sample_count)` returns that many mixed, clamped, interleaved stereo
samples. `release()` stops everything and unloads all sound effects.

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
from rsdkv4.animation import AnimationBank, AnimatedEntity, process_object_animation

bank = AnimationBank(sheet_loader=lambda name: 0)
with open("Data/Animations/Player.ani", "rb") as fh:
    anim_file = bank.load_animation_file(fh.read())

entity = AnimatedEntity(animation=0)
for _ in range(60):
    process_object_animation(bank.animation(anim_file, entity.animation), entity)
print(entity.frame)
```

```python
from rsdkv4.mixing import mix_into, clamp_samples

mix = [0] * 4
mix_into(mix, [1000, 1000, 1000, 1000], volume=100, pan=50)
print(clamp_samples(mix))  # [500, 1000, 500, 1000]
```

```python
import struct
from rsdkv4.audio import AudioEngine
from rsdkv4.wav import load_wav

def load_samples(path):
    try:
        with open(path, "rb") as fh:
            wav = load_wav(fh)
    except FileNotFoundError:
        return None
    return [s for (s,) in struct.iter_unpack("<h", wav.data)]

engine = AudioEngine(load_samples)
engine.load_sfx("Jump.wav", 0)
engine.play_sfx(0, False)
block = engine.render(512)
```

## What it does not do

- It does not send sound to an audio device. `render` only returns sample
  lists, and the caller must play them.
- It does not decode Ogg Vorbis. `.ogg` sound effects and music must be
  decoded by the `sound_loader` you supply.
- It does not read packed data files, draw sprites, run scripts or provide a
  game loop or command.