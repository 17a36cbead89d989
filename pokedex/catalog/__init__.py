"""
Catalogue package for browsing Pokemon.

The ``pokeapi_service`` module fetches the index and detail records from
PokeAPI, ``query`` filters, sorts and paginates the index locally, and
``router`` exposes both through the authenticated list and detail
endpoints.
"""
