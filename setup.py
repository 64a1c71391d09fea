#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="keymacros",
    version="0.1.0",
    license="GPL-3.0-or-later",
    description="Run shell commands for key sequences typed on a dedicated keypad",
    long_description="keymacros reads a keypad's evdev device, matches timed key sequences against a config file and launches the bound commands.",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Environment :: X11 Applications",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Desktop Environment",
        "Topic :: System :: Hardware",
    ],
    keywords=["evdev", "keypad", "macros", "xinput"],
    python_requires=">=3.11",
    install_requires=[
        "cattrs>=22.2.0",
        "msgspec>=0.18",
        "trio>=0.25.0",
    ],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "keymacros = keymacros.app:main",
        ],
    },
)
