# setup.py
"""Setup script for Recipe Codegen."""

from setuptools import setup, find_packages

setup(
    name="recipe-codegen",
    version="1.0.0",
    packages=find_packages(include=["codegen", "codegen.*", "cli", "cli.*"]),
    include_package_data=True,
    install_requires=[
        "click>=8.0",
        "pyyaml>=6.0",
        "jinja2>=3.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "structlog>=23.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "flake8>=6.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "recipegen=cli.main:cli",
        ],
    },
    python_requires=">=3.9",
)
