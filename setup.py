"""
Model Curator - free and cheap default-model curation

This setup.py file is provided for pip install compatibility.
"""

from setuptools import find_packages, setup

if __name__ == "__main__":
    setup(
        name="model-curator",
        version="0.2.0",
        description="Reconcile model pricing and quality listings into curated free and cheap tiers.",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        python_requires=">=3.11",
        install_requires=[
            "pydantic>=2.0",
            "pydantic-settings>=2.0",
            "PyYAML>=6.0",
            "rapidfuzz>=3.0",
        ],
        extras_require={
            "test": [
                "pytest>=7.0",
            ],
        },
        entry_points={
            "console_scripts": [
                "model-curator=modelcurator.cli.main:main",
            ],
        },
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Developers",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
        ],
    )
