from setuptools import setup, find_packages

setup(
    name="graft",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2",
        "python-dotenv",
        "colorama>=0.4.6",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
