# variant_notation/version.py

__version__ = "2.1.0"
