"""
Core infrastructure shared by every Somewhere layer: exceptions, logging,
validation and path constants.
"""
