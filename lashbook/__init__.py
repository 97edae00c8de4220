"""
lashbook - appointment scheduling for lash studios.
"""

__version__ = "0.1.0"
