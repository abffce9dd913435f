#!/usr/bin/env python3

from setuptools import setup
from setuptools import find_packages


setup(
    name="litehist",
    description="Small footprint and configurable streaming histogram core.",
    author="LiteHist Developers",
    test_suite="test",
    license="BSD",
    python_requires="~=3.6",
    install_requires=[
        "migen",
        "litex",
    ],
    extras_require={
        "test": ["pytest"],
    },
    packages=find_packages(exclude=("test*", "sim*", "doc*")),
    include_package_data=True,
    platforms=["Any"],
    keywords="HDL ASIC FPGA hardware design histogram",
    classifiers=[
        "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
        "Environment :: Console",
        "Development Status :: Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
    ],
    entry_points={
        "console_scripts": [
            # Generator.
            "litehist_gen  = litehist.gen:main",

            # Host tools.
            "litehist_dump = litehist.software.litehist_dump:main",
        ],
    },
)
