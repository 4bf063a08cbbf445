"""
Test suite for the crawl policy engine.
"""
