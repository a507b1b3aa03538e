import os

from setuptools import setup

ext_modules = []
if os.environ.get("QUADINT_USE_MYPYC") == "1":
    from mypyc.build import mypycify

    # Only the arithmetic core; the rest leans on sympy and gains little from compilation
    ext_modules = mypycify([
        "quadint/utils.py",
        "quadint/ring.py",
        "quadint/quad.py",
    ])

setup(
    name="quadint",
    version="0.1.0",
    description="Exact arithmetic, ideals and number theory in quadratic integer rings",
    packages=["quadint"],
    python_requires=">=3.9",
    install_requires=["sympy"],
    extras_require={
        "test": ["pytest"],
        "mypyc": ["mypy"],
    },
    ext_modules=ext_modules,

    license="MIT",
)
