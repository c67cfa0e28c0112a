from setuptools import setup, find_packages

setup(
    name="reconstruction-sim",
    version="0.1.0",
    packages=find_packages(include=["reconstruction", "reconstruction.*"]),
    install_requires=[
        "numpy",
        "Pillow",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "reconstruction-sim = reconstruction.runner:main",
        ],
    },
    python_requires=">=3.8",
)
