"""
Games module - Game-specific content.

Each game has its own subpackage with:
- Card definitions
- Level or round schedule
- Deck construction
"""
