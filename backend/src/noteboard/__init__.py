"""
Noteboard Backend - Collaborative Canvas Notes

Notes with tags and free-form canvas positions, kept in a dense per-owner
order and broadcast to connected boards in near real time.
"""

__version__ = "1.0.0"
