"""
Setup configuration for the project.
Allows the package to be installed in development mode.
"""

from setuptools import setup, find_packages

setup(
    name="sappy-di",
    version="1.0.0",
    description="Structured Application Toolkit: protected maps, collections and a lazy dependency-injection container",
    author="Sappy Contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "python-dotenv>=1.0.0",
        "regex>=2023.10.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    python_requires=">=3.8",
)
