#!/usr/bin/env python
# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import re
import os.path
from io import open
from setuptools import setup, find_packages


EXTENSION_REF_NAME = "azext_aksengine"

# Version extraction inspired from 'requests'
with open(os.path.join(EXTENSION_REF_NAME, "constants.py"), "r", encoding="utf-8") as fd:
    constants_raw = fd.read()
    VERSION = re.search(r'^VERSION\s*=\s*[\'"]([^\'"]*)[\'"]', constants_raw, re.MULTILINE).group(1)
    PACKAGE_NAME = re.search(r'^EXTENSION_NAME\s*=\s*[\'"]([^\'"]*)[\'"]', constants_raw, re.MULTILINE).group(1)


if not VERSION:
    raise RuntimeError("Cannot find version information")

if not PACKAGE_NAME:
    raise RuntimeError("Cannot find package information")


DEPENDENCIES = [
    "azure-cli-core>=2.46.0",
    "knack>=0.10.1",
    "jinja2>=3.1,<4.0",
    "requests>=2.28",
    "pyyaml>=6.0",
    "rich>=13.6,<14.0",
]

TEST_DEPENDENCIES = [
    "pytest>=7.0",
    "pytest-mock>=3.10",
    "responses>=0.23",
]

CLASSIFIERS = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Programming Language :: Python",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
]

short_description = "AKS Engine template assembly for Azure CLI."

setup(
    name=PACKAGE_NAME,
    version=VERSION,
    python_requires=">=3.9",
    description=short_description,
    long_description="{} Renders ARM deployment fragments, extension linked templates and kubeconfig documents "
    "from an AKS Engine cluster api model.".format(short_description),
    license="MIT",
    author="Microsoft",
    classifiers=CLASSIFIERS,
    packages=find_packages(exclude=["tests", "*.tests", "*.tests.*", "scripts"]),
    package_data={
        EXTENSION_REF_NAME: [
            "azext_metadata.json",
            "engine/providers/templating/templates/*",
            "engine/providers/templating/templates/addons/*",
        ]
    },
    install_requires=DEPENDENCIES,
    extras_require={"test": TEST_DEPENDENCIES},
    zip_safe=False,
)
