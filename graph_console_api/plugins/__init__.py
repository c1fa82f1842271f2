"""
Plugin contracts — abstract base class for driver plugins.
"""
from .base import DriverPlugin

__all__ = ['DriverPlugin']
