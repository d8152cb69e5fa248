"""
Objects API Client.

Typed async client for the restful-api.dev object store, with the
entity model it decodes into and the scoped create/delete lifecycle
used by the CRUD scenario suite.
"""
