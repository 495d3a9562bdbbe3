#!/usr/bin/env python3
"""
Setup script for X-Recruit (auth API + CLI)

Install with:
    pip install -e .

Or with test tooling:
    pip install -e ".[dev]"
"""

from setuptools import setup, find_namespace_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

# Backend (FastAPI) dependencies
server_requirements = [
    "fastapi>=0.110.0",
    "uvicorn[standard]>=0.27.0",
    "pydantic>=2.5.0",
    "pydantic-settings>=2.1.0",
    "sqlalchemy[asyncio]>=2.0.25",
    "aiosqlite>=0.19.0",
    "python-jose[cryptography]>=3.3.0",
    "bcrypt>=4.1.0",
    "slowapi>=0.1.9",
]

# CLI dependencies
cli_requirements = [
    "httpx>=0.26.0",
    "rich>=13.7.0",
    "python-jose[cryptography]>=3.3.0",
]

setup(
    name="xrecruit",
    version="1.0.0",
    description="X-Recruit - registration, login and session tokens",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="X-Recruit Team",
    license="MIT",
    packages=(
        find_namespace_packages(include=["cli", "cli.*"])
        + find_namespace_packages("backend", include=["app", "app.*"])
    ),
    package_dir={"app": "backend/app"},
    python_requires=">=3.9",
    install_requires=sorted(set(server_requirements + cli_requirements)),
    extras_require={
        "server": server_requirements,
        "cli": cli_requirements,
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.24.0",
            "faker>=22.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "xrecruit=cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Framework :: FastAPI",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
