"""
Court facilities: room inventory, court term scheduling and term sheet import.
"""
