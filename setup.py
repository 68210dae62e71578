from setuptools import setup, find_packages

setup(
    name="cliniscan",
    version="1.0.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "pandas>=2.0",
        "python-dateutil>=2.8",
        "PyYAML>=6.0",
        "watchdog>=3.0",
        "psutil>=5.9"
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "cliniscan=cliniscan.cli:main",
        ],
    },
    python_requires=">=3.10",
    description="Pre-import analysis engine for clinical data files",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Healthcare Industry",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ]
)
