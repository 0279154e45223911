"""Setup script for drawing_facts package."""

from setuptools import setup, find_packages

setup(
    name="drawing_facts",
    version="1.0.0",
    description="Text-based fact extraction from PDF engineering drawing packages",
    author="Continental Machines Inc.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pymupdf>=1.23.0",
        "pillow>=9.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
        ],
    },
)
