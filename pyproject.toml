[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tribbiedash"
version = "0.1.0"
description = "A three-lane side-scrolling runner: collect letters and coins, dodge shields and crystals, reach the receiver."
requires-python = ">=3.10"
keywords = ["game", "runner", "arcade", "pygame", "side-scroller"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tribbiedash = "tribbiedash.app:main"

[tool.hatch.build.targets.wheel]
packages = ["tribbiedash"]

[tool.pytest.ini_options]
addopts = "-ra"
