"""Setup for Workout Timer.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import find_namespace_packages, setup

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "Workout Timer",
        "CFBundleDisplayName": "Workout Timer",
        "CFBundleIdentifier": "com.intervaltimer.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

setup(
    app=APP,
    data_files=DATA_FILES,
    options={"py2app": OPTIONS},
    setup_requires=["py2app"] if "py2app" in sys.argv else [],
    name="interval-timer",
    version="0.1.0",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["intervaltimer", "intervaltimer.*"]),
    install_requires=[
        "PyQt6>=6.5",
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "gui_scripts": ["interval-timer = intervaltimer.__main__:main"],
    },
)
