from setuptools import setup, find_packages


setup(
    name="vehicle-dashboard-sim",
    version="0.1.0",
    description="Vehicle dashboard simulator with a tick-driven state machine and live dashboard service",
    packages=find_packages(include=["services*", "libs*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi>=0.110.0",
        "requests>=2.31.0",
        "uvicorn>=0.24.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.25",
        ],
    },
)
