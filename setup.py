"""Packaging for MultiTimer.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_namespace_packages

APP = ["main.py"]
OPTIONS = {
    "argv_emulation": False,
    "plist": {
        "CFBundleName": "MultiTimer",
        "CFBundleDisplayName": "MultiTimer",
        "CFBundleIdentifier": "com.multitimer.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
    },
}

# py2app only when building the bundle; plain installs stay portable
app_kwargs = {}
if "py2app" in sys.argv:
    app_kwargs = {
        "app": APP,
        "options": {"py2app": OPTIONS},
        "setup_requires": ["py2app"],
    }

setup(
    name="MultiTimer",
    version="0.1.0",
    description="Stopwatch, countdown and Pomodoro timer",
    packages=find_namespace_packages(include=["multitimer", "multitimer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "numpy>=1.24",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "gui_scripts": ["multitimer = multitimer.__main__:main"],
    },
    **app_kwargs,
)
