"""
pmexec — command-execution engine for package-manager wrappers.
"""

__version__ = "0.1.0"
