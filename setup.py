"""
Python package configuration for brand-elasticity.

This setup script configures the package for distribution and installation,
defining metadata, dependencies, and entry points.
"""
from setuptools import setup, find_packages

# Read the long description from README.md
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Parse requirements from requirements.txt
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh.readlines() if line.strip() and not line.startswith("#")]

# Configure package metadata and dependencies
setup(
    # Basic package information
    name="brand-elasticity",
    version="0.1.0",
    description="Per-brand log-log demand models and brand x brand effect matrices for scanner data",

    # Detailed description for PyPI page
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Top-level packages plus the CLI module
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],

    # PyPI classifiers for package categorization
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],

    # Python version requirements
    python_requires=">=3.8",

    # Dependencies from requirements.txt
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },

    # Command-line scripts that can be called after installation
    entry_points={
        "console_scripts": [
            "brand-elasticity=main:main",
        ],
    },
)
