"""
Unit Tests

Fast tests with mocked collaborators; no LLM provider or storage needed.
"""
