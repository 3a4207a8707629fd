from setuptools import setup, find_packages


setup(
    name="gabung",
    version="0.1",
    packages=find_packages(),
    description="A simple file merger: pack files into one container and split them back.",
    author="vercingetorx",
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gabung=gabung.cli:main",
        ]
    },
)
