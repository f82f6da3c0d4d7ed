#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import os
import re

from setuptools import find_packages, setup


def read_version() -> str:
    """Read `bonjson.__version__` without importing the package, its dependencies may not be installed yet."""
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'bonjson', '__init__.py')
    with open(path, 'r') as fp:
        match = re.search(r"^__version__ = '([^']+)'", fp.read(), re.MULTILINE)
    assert match is not None, 'bonjson/__init__.py must define __version__'
    return match.group(1)


install_requires = [
    'colorama>=0.4',
    'configargparse>=1.5',
    'pydantic>=2.10',
    'structlog>=23.1',
    'typing_extensions>=4.6',
]

setup(
    name='bonjson',
    version=read_version(),
    description='Typed encoding and decoding of BONJSON documents',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache-2.0',
    python_requires='>=3.11',
    entry_points={
        'console_scripts': ['bonjson-cli=bonjson_cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(exclude=('bonjson_tests', 'bonjson_tests.*')),
    install_requires=install_requires,
    extras_require={
        'test': ['pytest>=7'],
    },
)
