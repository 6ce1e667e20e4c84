#!/usr/bin/env python
# -*- encoding: utf-8 -*-

# Copyright 2011-2020, Nigel Small
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from os import path

from setuptools import setup, find_packages

from neorest.meta import get_metadata


README_FILE = path.join(path.dirname(__file__), "README.rst")


def get_readme():
    with open(README_FILE) as f:
        return f.read()


setup(**dict(get_metadata(), **{
    "long_description": get_readme(),
    "long_description_content_type": "text/x-rst",
    "packages": find_packages(exclude=("docs", "test", "test.*")),
    "py_modules": [],
    "python_requires": ">=3.6",
    "install_requires": [
        "certifi",
        "packaging",
        "pansi>=2024.11.0",
        "urllib3",
    ],
    "extras_require": {
        "test": [
            "pytest",
        ],
    },
}))
