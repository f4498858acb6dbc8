from pathlib import Path

from setuptools import find_packages, setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="prepflow",
    version="0.1.0",
    description="Preprocessing configuration and batch submission for tabular datasets.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    include_package_data=True,
    packages=find_packages(include=["prepflow", "prepflow.*"]),
    install_requires=[
        "pandas>=2.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "fastapi>=0.110.0",
        "python-multipart>=0.0.9",
        "httpx>=0.27.0",
        "aiofiles>=23.1.0",
        "rich>=13.0.0",
        "uvicorn>=0.27.0",
    ],
    extras_require={
        "dev": ["pytest", "pytest-asyncio>=0.23.0", "twine", "build"],
    },
    entry_points={
        "console_scripts": ["prepflow=prepflow.main:run"],
    },
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
)
