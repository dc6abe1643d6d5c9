"""
Library Catalog - in-memory book registry

A book catalog engine providing:
- Unique, case-insensitive ISBN lookup
- Author and category indices kept consistent with the primary store
- Title substring search
- Console and HTTP front ends
"""

__version__ = "0.1.0"
