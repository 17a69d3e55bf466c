"""
HTTP boundary: routes, dependencies and middleware.
"""
