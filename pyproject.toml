[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nashell"
version = "0.1.0"
description = "A small interactive Unix shell with job control, history, redirection and pipes"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "job-control", "repl", "unix", "pipes"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nashell = "nashell.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["nashell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
