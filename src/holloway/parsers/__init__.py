"""Parsers for fetched Gemini, Gopher and Finger content."""
