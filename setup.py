#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="inputlog",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="Buffered keyboard and mouse input logging to JSON lines",
    long_description="Captures global keyboard and pointer input, turns it into timestamped events, and appends them to a JSON-lines log in batches.",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    python_requires=">=3.11",
    install_requires=[
        "cattrs>=23.1",
        "msgspec",
        "pynput>=1.7",
        "python-dateutil>=2.8.1",
        "trio>=0.25.0",
        "trio-util>=0.7.0",
    ],
    tests_require=["pytest>=8.0", "pytest-trio>=0.8.0"],
    extras_require={
        "test": ["pytest>=8.0", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "inputlog = inputlog.app:run",
        ],
    },
    setup_requires=[
        "setuptools>=30.3.0",
        "wheel",
    ],
)
