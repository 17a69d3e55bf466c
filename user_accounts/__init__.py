"""
User Management Service

Account registration, bcrypt password storage and JWT login behind a
FastAPI HTTP API.
"""
