"""
Helpers without database access: the naming engine, the home filesystem
wrapper and command line parsing.
"""
