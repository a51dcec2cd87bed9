"""
kanbanchan - keeps a Notion games database in step with a Steam library and wishlist
"""

__version__ = '0.1.0'
