from setuptools import setup, find_packages

setup(
    name="cooklang_parser",
    version="1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    description="A tolerant and strict parser for the Cooklang recipe markup language.",
    install_requires=["peggie>=0.2.0"],
    extras_require={
        "test": ["pytest", "pyyaml"],
    },
)
