# -*- coding: utf-8 -*-
"""aerospike-vault-plugin a Vault database plugin for aerospike.

This module creates, updates and drops aerospike users on behalf of Vault and
rotates the root credentials the plugin connects with.

"""

import setuptools
import re
from io import open

VERSIONFILE="aerospike_vault_plugin/_version.py"
verstrline = open(VERSIONFILE, "rt").read()
VSRE = r"^__version__ = ['\"]([^'\"]*)['\"]"
mo = re.search(VSRE, verstrline, re.M)
if mo:
    verstr = mo.group(1)
else:
    raise RuntimeError("Unable to find version string in %s." % (VERSIONFILE,))

with open("README.md", "r", encoding='utf-8') as fh:
    long_description = fh.read()

setuptools.setup(
    name='aerospike_vault_plugin',
    version=verstr,
    description="A Vault database plugin that manages aerospike users and rotates its own "
                "root credentials over a single shared connection",
    long_description_content_type="text/markdown",
    long_description=long_description,
    packages=setuptools.find_packages(),
    python_requires=">=3.8",
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    license="MIT",
    scripts=[],
    install_requires=[
        "aerospike>=14.0",
        "cryptography>=39.0",
    ],
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],

)
