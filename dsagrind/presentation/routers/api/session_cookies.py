"""Refresh-token cookie handling.

The cookie is HttpOnly, Secure, SameSite=Strict and scoped to /api/auth, so
browsers only send it to the refresh/revoke/logout endpoints.
"""

from fastapi import Request, Response

from dsagrind.core.config import settings

COOKIE_PATH = "/api/auth"


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=refresh_token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        path=COOKIE_PATH,
        secure=True,
        httponly=True,
        samesite="strict",
    )


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path=COOKIE_PATH,
        secure=True,
        httponly=True,
        samesite="strict",
    )


def read_refresh_cookie(request: Request) -> str | None:
    return request.cookies.get(settings.refresh_cookie_name)
