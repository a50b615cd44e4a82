"""
Default categories offered to new users.
Seeded on request (API or management command), never automatically.
"""
from typing import Dict, List


DEFAULT_CATEGORIES: List[Dict[str, str]] = [
    {'name': 'Work', 'color': '#3B82F6'},
    {'name': 'Personal', 'color': '#10B981'},
    {'name': 'Shopping', 'color': '#F59E0B'},
    {'name': 'Health', 'color': '#EF4444'},
]
