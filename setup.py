"""
Setup script for ccipwrite package
"""

from setuptools import setup, find_packages

setup(
    name="ccipwrite",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "web3>=6.0.0",
        "eth-account>=0.8.0",
        "eth-keys>=0.4.0",
        "eth-abi>=4.0.0",
        "cryptography>=3.4.7",
        "pydantic>=2.0",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "ccipwrite=ccipwrite.cli.signer_cli:main",
        ],
    },
    python_requires=">=3.8",
    author="LogiChain",
    description="Key derivation, data signing and signer approvals for off-chain writes",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
