"""
Setup script for kalimdor package.
"""

from setuptools import setup, find_packages

setup(
    name="kalimdor",
    version="0.1.0",
    packages=find_packages(include=["kalimdor", "kalimdor.*"]),
    install_requires=[
        # Core numerical dependencies
        "numpy>=1.20.0",
        "pandas>=1.3.0",
        "scipy>=1.7.0",
        "scikit-learn>=1.0.0",

        # Utilities
        "pyyaml>=6.0.0",
    ],
    extras_require={
        # Testing
        "test": [
            "pytest>=6.0.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'kalimdor=kalimdor.__main__:main',
        ],
    },
    author="kalimdor contributors",
    description="Classical machine learning primitives on nested arrays",
    keywords="machine learning, clustering, regression, preprocessing, tensors",
    python_requires=">=3.8",
)
