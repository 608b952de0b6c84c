# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="combiner",
    version="0.1.0",
    description="Combine the text files of a directory tree into one file and report token statistics",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["combiner", "combiner.*"]),
    install_requires=[
        "tiktoken",
        "rich",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'combiner=combiner.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
