"""
buildprops — write build metadata properties files without needless rewrites.
"""

__version__ = "0.1.0"
