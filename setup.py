#!/usr/bin/env python
from setuptools import setup

VERSION = "0.1.0"

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name="jsonschema-infer",
    version=VERSION,
    description="Incremental JSON Schema inference from JSON samples",
    long_description=long_description,
    long_description_content_type="text/markdown",

    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: Apache Software License",

        "Operating System :: MacOS :: MacOS X",
        "Operating System :: POSIX :: Linux",

        "Programming Language :: Python :: 3",
    ],

    install_requires=[
        "attrs>=18.1.0",
        "jsonpath-ng>=1.5.0",
        "python-dateutil>=2.7.3",
        "simplejson>=3.11.1",
        "singer-python>=5.2.0",
    ],
    extras_require={
        "test": [
            "jsonschema",
            "pytest",
        ],
    },
    entry_points="""
    [console_scripts]
    jsonschema-infer=jsonschema_infer:main
    """,
    packages=["jsonschema_infer"],
    include_package_data=True
)
