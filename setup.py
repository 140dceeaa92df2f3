"""Setup script for the host_utils package."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file for long description
readme_path = Path(__file__).parent / "README.md"
try:
    with open(readme_path, encoding="utf-8") as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = "Host integration utilities for a desktop document editor"

setup(
    name="host_utils",
    version="1.0.0",
    description="Encoding detection, tool discovery, process supervision, git commits and trash deletion for a desktop editor",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Max Qian",
    author_email="astro_air@126.com",
    url="https://github.com/max-qian/lithium-next",
    package_dir={"": "python/tools"},
    packages=find_packages("python/tools", include=["host_utils", "host_utils.*"]),
    python_requires=">=3.11",
    install_requires=[
        "loguru>=0.7.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "mypy>=1.0.0",
            "black>=22.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: MacOS",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Text Editors",
        "Topic :: Utilities",
    ],
)
