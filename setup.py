from setuptools import setup, find_packages
import os
import re

# Import version from TypedConfig/__init__.py
with open(os.path.join('TypedConfig', '__init__.py'), 'r') as f:
    version = re.search(r"__version__\s*=\s*'(.*)'", f.read()).group(1)

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="TypedConfig",
    version=version,
    description="A typed, hierarchical configuration store with nested keys and background reload",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(include=["TypedConfig", "TypedConfig.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=5.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
