from setuptools import setup, find_packages

setup(
    name="provider_bookability",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pyarrow>=19.0.1",
        "boto3>=1.29.0",
        "PyYAML>=6.0",
        "structlog>=23.1.0",
        "tenacity>=8.2.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.4.0"],
    },
    entry_points={
        "console_scripts": [
            "provider-bookability=provider_bookability.__main__:main",
        ],
    },
    python_requires=">=3.9",
)
