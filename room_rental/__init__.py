"""
Room Rental API: a marketplace for room listings, galleries and saved rooms.
"""

__version__ = "1.0.0"
