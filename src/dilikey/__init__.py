"""dilikey - Dilithium key containers, signing and verification from the command line."""

__version__ = "1.0.0"
__author__ = "Quantum Blockchains Team"
__description__ = "Utility for generating, signing and verifying with Dilithium keys"

from . import lib

__all__ = ["lib"]
