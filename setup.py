from setuptools import setup, find_packages

setup(
    name="rcsfmt",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml",
        "tqdm>=4.60",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "rcsfmt=rcsfmt.cli:main",
        ],
    },
    author="Uday Kanth",
    description="Run a formatter and patch its output into files in place via RCS diffs.",
)
