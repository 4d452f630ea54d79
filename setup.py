#!/usr/bin/env python3
"""Setup script for bbcards package."""

from setuptools import setup, find_packages

setup(
    name="bbcards",
    version="0.1.0",
    description="Bigger, Blacker Cards: print-ready PDF card sheets from plain-text decks",
    author="Bigger, Blacker Cards Project",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click>=8.0.0",
        "reportlab>=4.0",
        "Pillow>=10.0.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "bbcards=bbcards.cli:cli",
        ],
    },
    python_requires=">=3.10",
)
