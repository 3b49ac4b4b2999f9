"""Candidate profile extraction from LinkedIn search results."""
