from setuptools import setup, find_packages
import os

# Ensure we are in the correct directory
os.chdir(os.path.dirname(os.path.abspath(__file__)))

setup(
    name="mycoprofiler",
    version="1.0.0",
    description="KEGG and GO enrichment for Mycobacterium avium and M. abscessus protein/gene tables",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pandas",
        "numpy",
        "scipy",
        "statsmodels",
        "requests",
        "mygene",
        "python-dotenv",
        "goatools",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "mycoprofiler=mycoprofiler.cli:main",
        ],
    },
    zip_safe=False,
)
