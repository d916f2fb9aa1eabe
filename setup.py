"""Setup configuration for Brain Relay."""

from setuptools import find_packages, setup

setup(
    name="brainrelay",
    version="0.1.0",
    description="Brain Relay — sequences OpenAI assistants over a brain dump and stores each stage",
    python_requires=">=3.11",
    packages=find_packages(where="src", include=["brainrelay*"]),
    package_dir={"": "src"},
    install_requires=[
        "httpx>=0.27.0",
        "pydantic>=2.6.0",
        "pydantic-settings>=2.1.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.29.0",
        "google-cloud-firestore>=2.16.0",
    ],
    entry_points={
        "console_scripts": [
            "brainrelay=brainrelay.cli:cli_entry",
        ],
    },
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.23.0",
            "respx>=0.21.0",
        ],
    },
)
