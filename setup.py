from setuptools import setup, find_packages

setup(
    name="latency-topology",
    version="0.1.0",
    packages=find_packages(include=["latency_topology", "latency_topology.*"]),
    install_requires=[
        "flask>=2.0.0",
        "flask-cors>=3.0.0",
        "aiohttp>=3.8.0",
        "prometheus-client>=0.14.0",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.18.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "latency-topology=latency_topology.api.app:main",
        ],
    },
    python_requires=">=3.8",
)
