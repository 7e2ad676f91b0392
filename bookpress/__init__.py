"""
bookpress - build the handbook as HTML and print it to PDF with headless Chromium.
"""

__version__ = "0.1.0"
