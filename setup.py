"""
Setup script for Tangle.

Usage:
    pip install -e .           # Editable install
    pip install -e ".[dev]"    # With dev dependencies (pytest)

Modules inside src/tangle import each other by flat name (e.g.
`from tangle_types import Rope`); `tangle/__init__.py` puts its own
directory on sys.path so these imports resolve after installation.
"""

from setuptools import setup, find_packages


setup(
    name='tangle',
    version='0.1.0',
    description='Logic core for a rope untangling puzzle: crossings, weaves and moves.',
    python_requires='>=3.9',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    install_requires=[
        'numpy',
    ],
    extras_require={
        'dev': ['pytest'],
    },
)
