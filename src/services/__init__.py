"""
External service clients.

- google_search: Google Custom Search client for LinkedIn profile discovery
"""
