from setuptools import setup, find_packages
import pathlib

# Detect layout
use_src = pathlib.Path("src/recordkit").exists()
pkg_args = {"package_dir": {"": "src"}, "packages": find_packages(where="src")} if use_src \
           else {"packages": find_packages(where=".", exclude=["tests", "tests.*"])}

setup(
    name="record-kit",
    version="0.1.0",
    description="Field trees, value coercion, declared defaults and typed plain-data codecs for dataclasses",
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pydantic>=2",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    **pkg_args
)
