"""
agent_ranking/api package marker.
"""
