#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="tetrisrun",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="Gravity and key aliases for terminal Tetris",
    long_description="Reads raw keystrokes, translates aliases and arrow keys into game commands, "
    "and injects an accelerating drop command on a timer.",
    author="Rose Davidson",
    author_email="rose@metaclassical.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: POSIX",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Games/Entertainment :: Puzzle Games",
        "Topic :: Terminals",
    ],
    keywords=["tetris", "terminal", "trio"],
    python_requires=">=3.10",
    install_requires=[
        "cattrs>=23.1.0",
        "msgspec",
        "trio>=0.22.0",
        "trio-util>=0.7.0",
        "tricycle>=0.2.1",
    ],
    tests_require=["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "tetrisrun = tetrisrun.app:main",
            "tetrisrun-commands = tetrisrun.scripts:print_commands_cli",
            "tetrisrun-settings = tetrisrun.scripts:default_settings_cli",
        ],
    },
)
