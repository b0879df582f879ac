import json
from setuptools import setup, find_packages

# Load package settings from JSON file
with open('confstore/defaults.json', 'r') as defaults_file:
    defaults = json.load(defaults_file)

setup(
    name="confstore",
    version=defaults['version'],
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[],
    entry_points={
        "console_scripts": [
            "confstore=confstore.cli:main",
        ],
    },
    description="confstore: in-memory JSON configuration store with typed and required lookups",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.9',
    extras_require={
        "dev": [
            "pytest",
            "black",
            "flake8",
        ],
    },
    package_data={"confstore": ["defaults.json"]},
    include_package_data=True,
)
