from pathlib import Path

from setuptools import find_packages, setup

root = Path(__file__).parent
readme = root / "README.md"

setup(
    name="dotjsx",
    version="0.1.0",
    description="Compile doT templates into JSX/TSX component source.",
    long_description=readme.read_text("utf-8") if readme.exists() else "",
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "rich>=13.0",
        "rich-click>=1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
            "click>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dotjsx=dotjsx.cli.main:cli",
        ],
    },
    zip_safe=False,
)
