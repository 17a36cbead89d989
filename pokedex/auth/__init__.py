"""
Authentication package.

``credentials`` holds the credential stores, ``session`` the gate that
checks logins and signs/verifies session tokens, and ``router`` the
login endpoints built on top of them. Routes elsewhere protect
themselves with ``dependencies.require_session``.
"""
