"""Syndication feed service: MSN and Samsung RSS feeds from block-based articles."""
