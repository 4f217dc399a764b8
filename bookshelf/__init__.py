"""bookshelf package."""
