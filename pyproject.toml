[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "avocadoos"
version = "0.1.0"
description = "Kernel building blocks in pure Python: read-only FAT16 access, block heap, page tables, descriptor encoding and a text-mode terminal."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "fat16",
    "filesystem",
    "kernel",
    "heap",
    "paging",
    "gdt",
    "idt",
    "vga",
    "disk-image",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: System :: Operating System Kernels",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
avocadoos-ringbuffer = "avocadoos.ringbuffer:main"
avocadoos-list = "avocadoos.circular_list:main"

[tool.hatch.build.targets.wheel]
packages = ["avocadoos"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
