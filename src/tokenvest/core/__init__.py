"""
tokenvest core: constants, configuration, logging, exceptions and contracts.
"""

__all__ = []
