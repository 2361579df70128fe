"""
Agent ranking: per-agent listing volume from a paginated real-estate feed.
"""
