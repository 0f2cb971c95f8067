"""
ccipwrite command line interface
"""

from .signer_cli import SignerCLI, main

__all__ = ['SignerCLI', 'main']
