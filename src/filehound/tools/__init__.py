"""
Search tools for FileHound.

This package contains the traversal engine and its collaborators: entry
abstraction, filter predicates, expression parsing, root resolution and
result formatting.
"""
