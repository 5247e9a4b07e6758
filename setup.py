"""
ForgePack package installation
"""
from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf8") as f:
    long_description = f.read()

setup(
    name="forge-pack",
    description="Generate self-contained Solidity deployer libraries from build artifacts.",
    url="https://github.com/forge-pack/forge-pack",
    author="forge-pack contributors",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=["pycryptodome>=3.4.6", "cbor2", "eth-utils>=2.0.0"],
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
        ],
        "lint": [
            "black==22.3.0",
            "pylint==2.13.4",
            "mypy==0.942",
            "darglint==1.8.0",
        ],
        "doc": [
            "pdoc",
        ],
        "dev": [
            "forge-pack[test,doc,lint]",
        ],
    },
    license="MIT",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_data={"forge_pack": ["py.typed"]},
    entry_points={"console_scripts": ["forge-pack = forge_pack.__main__:main"]},
)
