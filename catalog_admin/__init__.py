"""
Catalog Admin

Product catalog administration with a time-correct catalog view assembler.
"""

__version__ = "1.0.0"
