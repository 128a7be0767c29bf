"""Version information for nsdebug.

setup.py reads __version__ from this file; keep it PEP 440.
"""

__version__ = "0.1.0b0"
__app_name__ = "nsdebug"
