#!/usr/bin/env python3
"""Setup script for deckexport package."""

from setuptools import setup, find_packages

setup(
    name="deckexport",
    version="0.1.0",
    description="Shareable deck images for the card game deck builder",
    author="Deck Builder Project",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "deckexport": ["templates/*"],
    },
    include_package_data=True,
    install_requires=[
        "click>=8.0.0",
        "Pillow>=10.1.0",
        "PyYAML>=6.0",
        "requests>=2.28.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "deckexport=deckexport.cli:cli",
        ],
    },
    python_requires=">=3.10",
)
