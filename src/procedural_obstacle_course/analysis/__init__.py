"""Analysis tools for generated course collections."""
