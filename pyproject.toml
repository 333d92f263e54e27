[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "photobooth"
version = "0.1.0"
description = "Photo booth page flow: template selection, countdown capture, timed recording and saving results as PNG or MJPEG AVI."
requires-python = ">=3.10"
keywords = ["photobooth", "camera", "capture", "video", "mjpeg", "avi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: Capture :: Digital Camera",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
photobooth = "photobooth.booth:main"

[tool.hatch.build.targets.wheel]
packages = ["photobooth"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
