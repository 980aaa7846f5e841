"""
themesync - validate design variable collections and export theme files.
"""

__version__ = "0.1.0"
