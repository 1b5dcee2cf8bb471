# setup.py
from setuptools import setup, find_packages

setup(
    name="listing_intake",        # Package name
    version="0.1",                # Version
    packages=find_packages(exclude=["test", "test.*"]),
    install_requires=[            # External dependencies
        "fastapi",
        "uvicorn",
        "python-multipart",
        "pydantic>=2",
        "asyncpg",
        "slowapi",
        "google-cloud-storage",
        "Pillow",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
            "polyfactory",
        ],
    },
    python_requires=">=3.10",
)
