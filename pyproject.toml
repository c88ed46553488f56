[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sochain"
version = "0.1.0"
description = "A simulated transaction chain of wallet and server workers that exchange transactions through bounded, semaphore-guarded buffers"
requires-python = ">=3.10"
dependencies = []
keywords = ["simulation", "producer-consumer", "transactions", "threading", "semaphores"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sochain = "sochain.main:main"

[tool.hatch.build.targets.wheel]
packages = ["sochain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
