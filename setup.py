# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from setuptools import find_packages, setup

with open("README.md", "r") as fh:
    long_description = fh.read()

# numpy>=1.14 for rcond=None correct defaults from https://stackoverflow.com/a/44678023
# scipy>=1.8.0 for the HiGHS method in linprog() and scipy.spatial.QhullError
# pycddlib>=3.0.0 for the functional API (cdd.matrix_from_array, cdd.copy_generators)
# cvxpy>=1.5.3 for CLARABEL as the default LP solver
INSTALL_REQUIRES = [
    "numpy>=1.14",
    "scipy>=1.8.0",
    "pycddlib>=3.0.0",
    "cvxpy>=1.5.3",
]
TESTS_REQUIRES = ["pytest", "coverage"]

setup(
    name="pyreachset",
    version="0.1.0",
    description="A Python package for exact and approximate representations of convex polytopes.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="AGPL-3.0-or-later",
    packages=find_packages(include=["pyreachset", "pyreachset.*"]),
    install_requires=INSTALL_REQUIRES,
    extras_require={
        "with_tests": TESTS_REQUIRES,
    },
    python_requires=">=3.9",
    zip_safe=False,
)
