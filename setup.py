from setuptools import setup, find_packages

setup(
    name="trialforge",
    version="0.1.0",
    description="Trial sequence generator for task-switching and PRP experiments",
    author="TrialForge Contributors",
    license="MIT",
    packages=find_packages(include=["trialforge", "trialforge.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.21.0",
        "PyYAML>=6.0",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=3.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "trialforge=trialforge.cli:main",
        ],
    },
)
