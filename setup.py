#!/usr/bin/env python3
"""
typed-kv Setup Script
=====================
Allows installation of the typed-kv package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # With the test dependencies
"""

from setuptools import setup, find_packages

setup(
    name="typed-kv",
    version="0.1.0",
    packages=find_packages(include=["typedkv", "typedkv.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "typed-kv=typedkv.server:main",
        ],
    },
)
