"""gitdesk - git desktop client with a commit graph"""

__version__ = "0.1.0"
