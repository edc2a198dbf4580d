from setuptools import setup, find_packages

setup(
    name="connect4net",
    version="0.2.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "connect4net=connect4net.interfaces.cli:main",
        ],
    },
)
