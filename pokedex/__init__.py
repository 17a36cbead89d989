"""
Pokedex catalogue service.

A small FastAPI application that gates a browsable, searchable and
paginated Pokemon catalogue behind a login. Catalogue data comes from
the public PokeAPI; search, sorting and pagination are performed
locally because the upstream offers none of them.
"""

__version__ = "1.0.0"
