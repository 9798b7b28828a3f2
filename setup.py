from setuptools import setup, find_packages

setup(
    name="vinoscore",
    version="0.1.0",
    description="Vinoscore - Deterministic wine attribute matching, blind tasting and recommendation scoring.",
    author="",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
)
