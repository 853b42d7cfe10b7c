"""Setup configuration for unit-harness."""

from setuptools import setup, find_packages

setup(
    name="unit-harness",
    version="0.1.0",
    description="Minimal test harness for tagged test classes",
    packages=find_packages(include=["unit_harness", "unit_harness.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "unit-harness=unit_harness.cli:main",
        ],
    },
)
