"""Setup script for bootunit."""

from pathlib import Path

from setuptools import find_packages, setup

readme_path = Path(__file__).parent / "README.md"
long_description = (
    readme_path.read_text() if readme_path.exists() else "Declarative one-shot startup units"
)

setup(
    name="bootunit",
    version="0.1.0",
    description="Declare one-shot startup units in TOML and activate them in order.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["bootunit", "bootunit.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1",
        "dependency-injector>=4.41",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "tomli>=2.0; python_version < '3.11'",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "bootunit=bootunit.__main__:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
        "Environment :: Console",
    ],
)
