"""
Services — the generator and its build-tool notification seam.
"""
