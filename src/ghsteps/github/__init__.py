"""ghsteps GitHub - REST API request client."""

from ghsteps.github.client import (
    API_BASE,
    Envelope,
    GitHubClient,
    GitHubClientError,
    RequestDescriptor,
    TransportError,
    decode_query,
    encode_query,
    github_api_request,
)

__all__ = [
    "API_BASE",
    "Envelope",
    "GitHubClient",
    "GitHubClientError",
    "RequestDescriptor",
    "TransportError",
    "decode_query",
    "encode_query",
    "github_api_request",
]
