#!/usr/bin/env python3
"""Setup script for wasm-sourcemap."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

setup(
    name="wasm-sourcemap",
    version="0.1.0",
    author="wasm-sourcemap developers",
    description="Extract DWARF line information from WebAssembly modules as source maps",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Debuggers",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pyelftools>=0.30",  # DWARF decoding
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "mypy>=1.0",
            "flask>=2.2",
        ],
        "server": [
            "flask>=2.2",  # For server.py
        ],
    },
    entry_points={
        "console_scripts": [
            "wasm-sourcemap=wasm_sourcemap_py.cli:main",
        ],
    },
)
