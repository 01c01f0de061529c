"""
REST routers of the Auto API.
"""
