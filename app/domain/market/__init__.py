"""
Market bounded context: domain layer.

This module contains all domain logic for the neighborhood market:
- Users, trade posts and their trade lifecycle
- Geospatial/keyword discovery criteria
- Like/unlike toggling for trade posts and neighbor posts
"""
