"""SciCalc - Scientific calculator for the terminal."""
from setuptools import setup, find_packages

setup(
    name="scicalc",
    version="1.0.0",
    description="Scientific calculator with plotting, tools, word problems and voice input",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click>=8.1.0",
        "rich>=13.0.0",
        "questionary>=2.0.0",
        "sympy>=1.12",
        "numpy>=1.24",
        "matplotlib>=3.5",
        "requests>=2.28",
        "SpeechRecognition>=3.10",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "scicalc=scicalc.cli:main",
        ],
    },
    python_requires=">=3.10",
)
