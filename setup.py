from setuptools import setup, find_packages

setup(
    name="settlement_engine",
    version="0.1.0",
    description="Parlay-aware bet settlement, profit and performance metrics engine",
    author="Your Name",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pandas",
        "numpy",
        "pydantic>=2",
        "pydantic-settings>=2",
        "pyyaml",
        "loguru",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.9",
)
