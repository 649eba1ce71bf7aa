# setup.py

import os
from setuptools import setup, find_packages

# Load version from version.py
version = {}
with open(os.path.join("variant_notation", "version.py")) as f:
    exec(f.read(), version)

setup(
    name="variant-notation",
    version=version["__version__"],
    packages=find_packages(include=["variant_notation", "variant_notation.*"]),
    include_package_data=True,
    install_requires=[
        "regex>=2024.7.24",
        "biopython>=1.84",
        "setuptools>=72.2.0",
    ],
    description="Parser and serializer for HGVS-like variant notation",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    extras_require={
        "dev": [
            "pytest",
            "black",
            "flake8",
        ],
    },
    package_data={
        "variant_notation": [
            "config.json",  # Include config.json in the variant_notation package
        ],
    },
)
