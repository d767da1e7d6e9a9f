from setuptools import setup, find_packages

setup(
    name="dense-embed",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "*.tests"]),
    install_requires=[
        "numpy>=1.26",
        "scipy>=1.11",
        "tqdm~=4.66",
        "scikit-learn~=1.7.0",
    ],
    extras_require={
        "dev": ["pytest"],
    },
    python_requires=">=3.9",
    author="Your Name",
    description="Dimensionality reduction of dense matrices from the command line",
    entry_points={
        "console_scripts": [
            "dense-embed=scripts.embedding.embed:main",
        ],
    },
)
