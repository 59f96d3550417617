"""
Setup script for the Mongo_Ops package.
"""

from setuptools import setup, find_packages

setup(
    name="mongo_ops",
    version="0.1.0",
    description="MongoDB operations status monitoring and Prometheus exporter",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["mongo_ops_exceptions"],
    install_requires=[
        "pymongo>=4.2.0",
        "pydantic>=2.0.0,<3.0.0",
        "pydantic-settings>=2.0.0",
        "pydantic-yaml>=1.1.0",
        "pyyaml>=6.0",
        "tenacity>=8.1.0",  # For startup retry logic
        "prometheus-client>=0.16.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
            "flake8>=6.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mongodb-ops-exporter=monitoring.exporter:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
)
