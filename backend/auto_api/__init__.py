"""
Auto API: REST and GraphQL service for the Auto aggregate.
"""
