# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="rdu",
    version="0.1.0",
    description="Recursive disk usage summary in the manner of du, with parallel directory walking",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["rdu", "rdu.*"]),
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "rdu=rdu.main:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Topic :: System :: Filesystems",
    ],
)
