"""
pomsuite - page-object based UI and API test automation.
"""

__version__ = "1.0.0"
