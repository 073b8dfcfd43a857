#!/usr/bin/env python3
"""
p0f-client v1.0.0 - Setup Configuration
=======================================

Client library and CLI for querying a running p0f passive fingerprinting
daemon over its local API socket.

Installation:
    pip install .

    OR (development mode):
    pip install -e .[dev]

    Creates the 'p0f-query' console script.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read long description from README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Core dependencies
REQUIRED_PACKAGES = [
    "jsonschema>=4.0.0",    # Configuration file validation
    "colorama>=0.4.6",      # Cross-platform colored output
]

# Optional development dependencies
EXTRAS_REQUIRE = {
    "dev": [
        "pytest>=7.0.0",    # Testing
        "pytest-cov>=4.0.0", # Coverage reporting
        "black>=22.0.0",    # Code formatting
        "pylint>=2.14.0",   # Linting
        "mypy>=0.950",      # Type checking
    ],
}

setup(
    # Package Information
    name="p0f-client",
    version="1.0.0",
    description="Client for the p0f passive fingerprinting daemon's query socket",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Classification
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Topic :: System :: Networking",
        "Topic :: System :: Networking :: Monitoring",
        "Topic :: Security",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],

    # Keywords for searching
    keywords=[
        "p0f",
        "fingerprinting",
        "os-detection",
        "passive",
        "network",
        "security",
    ],

    # Package Configuration
    packages=find_packages(exclude=["tests", "tests.*"]),

    # Python Version Requirement
    python_requires=">=3.8",

    # Dependencies
    install_requires=REQUIRED_PACKAGES,
    extras_require=EXTRAS_REQUIRE,

    # Entry Points (Console Scripts)
    entry_points={
        "console_scripts": [
            "p0f-query=p0f_client.cli:main",
        ],
    },

    zip_safe=False,
)
