"""OAuth request/response schemas.

Endpoints (prefix /api/oauth):
    GET  /providers             - Supported providers
    GET  /{provider}/url        - Authorization URL and state
    POST /{provider}/callback   - Exchange the authorization code
"""

from pydantic import BaseModel, Field


class OAuthUrlResponse(BaseModel):
    """Authorization URL and the state bound to it."""

    url: str = Field(..., description="Provider authorization URL")
    state: str = Field(..., description="Anti-CSRF state to echo back")


class OAuthCallbackRequest(BaseModel):
    """Provider redirect parameters forwarded by the frontend.

    Either ``code`` or ``error`` is expected.
    """

    code: str | None = Field(None, max_length=2048, description="Authorization code")
    state: str = Field("", max_length=512, description="State from the URL step")
    error: str | None = Field(None, description="Provider error code")
    error_description: str | None = Field(None, description="Provider error text")


class OAuthProviderInfo(BaseModel):
    name: str = Field(..., examples=["github"])
    display_name: str = Field(..., examples=["GitHub"])
    icon: str = Field(..., examples=["github"])
