"""I/O helpers for retrial.

Keep file formats here (trajectory text files) instead of `retrial.utils`.
"""
