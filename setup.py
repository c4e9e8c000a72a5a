from __future__ import annotations

from setuptools import find_packages, setup  # type: ignore

setup(
    name="custodia",
    version="0.1.0",
    description="Product custody and freshness ledger with an HTTP API and Python client",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "httpx>=0.27",
    ],
    extras_require={
        "test": [
            "pytest>=8",
        ],
    },
    entry_points={
        "console_scripts": [
            "custodia=custodia.__main__:main",
        ],
    },
)
