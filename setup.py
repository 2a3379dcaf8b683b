import re
from pathlib import Path

from setuptools import find_packages, setup

_HERE = Path(__file__).parent

# The version lives in the module, so it's available at runtime too
_VERSION = re.search(
    r'^__version__ = "([^"]+)"',
    (_HERE / "pysrc" / "chronext" / "_pymoment.py").read_text(),
    re.MULTILINE,
).group(1)

setup(
    name="chronext",
    version=_VERSION,
    description=(
        "Calendar arithmetic, comparison and strftime-style formatting "
        "for points in time"
    ),
    long_description=(_HERE / "README.md").read_text(),
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Typing :: Typed",
    ],
    python_requires=">=3.9",
    package_dir={"": "pysrc"},
    packages=find_packages("pysrc"),
    package_data={"chronext": ["py.typed"]},
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
            'time_machine; implementation_name != "pypy"',
            'python-dateutil; implementation_name != "pypy"',
            "pytest-benchmark",
        ],
        "docs": [
            "sphinx",
            "sphinx-copybutton",
            "myst-parser",
            "furo",
            "enum-tools[sphinx]",
        ],
    },
)
