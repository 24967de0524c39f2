"""
Setup script for limba-insights.

limba-insights exposes read-only analytical views over the language-learning
store: grammar metadata, content items and anonymized learner telemetry.
Its analytics core resolves grammar prerequisite trees, audits grammar
coverage of the content catalog, and samples content evenly across CEFR
levels.

The 'limba' command is the CLI entry point; `uvicorn main:app` serves the API.
"""

from setuptools import find_packages, setup

setup(
    name="limba-insights",
    version="0.1.0",
    description="Read-only pedagogical analytics for a language-learning content store",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["limba_insights", "limba_insights.*"]),
    py_modules=["config", "main"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # API
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "httpx>=0.25.0",
        # Database
        "sqlalchemy>=2.0.0,<2.1",
        "psycopg2-binary>=2.9.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "limba=limba_insights.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="language-learning cefr grammar analytics curriculum",
)
