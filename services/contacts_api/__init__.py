"""MyContacts - Contacts API service.

FastAPI service exposing the asynchronous contacts data source over HTTP.
"""

__all__: list[str] = []
