"""
Setup configuration for Content Versioning package.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

# Read requirements from requirements.txt
requirements = []
try:
    with open('requirements.txt') as f:
        requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]
except FileNotFoundError:
    pass

setup(
    name="content-versioning",
    version="0.1.0",
    author="Content Versioning Team",
    author_email="contact@content-versioning.dev",
    description="Version history, replacement and retention for content records",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/content-versioning/content-versioning",
    packages=find_packages(include=["content_core", "content_core.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP :: Site Management",
        "Topic :: Database",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "python-dotenv>=1.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
            "pre-commit>=3.0.0",
        ],
    },
    project_urls={
        "Bug Reports": "https://github.com/content-versioning/content-versioning/issues",
        "Source": "https://github.com/content-versioning/content-versioning",
    },
    keywords="cms content versioning history snapshots retention",
)
