from setuptools import setup, find_packages

setup(
    name="connect4net",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "gymnasium",  # Discrete action space for the random agent
        "filelock",
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
