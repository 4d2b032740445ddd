"""
Print Request Pipeline.

Scrapes printing-related emails from the public Clinton email archive,
extracts what is being printed and who is printing it with Gemini,
and writes the results to a Google Sheet.
"""

__version__ = "1.0.0"
