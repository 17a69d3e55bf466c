"""
Kernel layer: identity core, data models and the account event log.
"""
