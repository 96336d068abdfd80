"""Request transport for hclient.

`RequestDispatcher` sends `ApiRequest` descriptions through a shared
`httpx.AsyncClient`, attaching the access token from a `CredentialManager`
and retrying once after a 401 with a freshly refreshed token.
"""

from hclient.transport.dispatcher import ApiRequest, Attempt, RequestDispatcher

__all__ = ["ApiRequest", "Attempt", "RequestDispatcher"]
