[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rsdkv4"
version = "0.1.0"
description = "Sprite animation, WAV reading and software audio mixing core for a retro 2D game engine"
requires-python = ">=3.10"
dependencies = []
keywords = ["game-engine", "animation", "audio", "mixing", "wav", "retro", "sprites"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
    "Topic :: Multimedia :: Sound/Audio :: Mixers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rsdkv4"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
