"""
Setup script for the candidate-finder project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="candidate-finder",
    version="0.1.0",
    packages=find_packages(include=["src", "src.*"]),
    python_requires=">=3.11",
    install_requires=[
        "python-dotenv>=1.0",
        "requests>=2.31",
        "pydantic>=2.5",
        "tenacity>=8.2",
        "langchain-core>=0.3",
        "langchain-openai>=0.2",
        "openai>=1.40",
        "json-repair>=0.25",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
