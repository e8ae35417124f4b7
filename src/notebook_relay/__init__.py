"""
Notebook Relay - forwards document-processing and chat requests to
externally hosted webhooks and reports failures back to the status store.
"""

__version__ = "1.0.0"
