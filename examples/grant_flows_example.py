#!/usr/bin/env python3
"""
End-to-end OAuth 2.0 grant flow example.

Features demonstrated:
1. client_credentials grant with a completion handler
2. Token refresh
3. authorization_code grant through the system browser

Configure with environment variables:
    OAUTH_TOKEN_URL, OAUTH_AUTHORIZATION_URL, OAUTH_CLIENT_ID,
    OAUTH_CLIENT_SECRET, OAUTH_REDIRECT_URL (default http://localhost:8765/callback)
"""

import asyncio
import logging
import os

from chuk_oauth2_engine import (
    AuthorizationCodeRequest,
    ClientCredentialsRequest,
    EngineConfig,
    OAuth2Flow,
    RefreshTokenRequest,
    Response,
)


def print_section(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def report(response: Response):
    if response.ok:
        print("✅ Got tokens")
        print(f"   Expires In: {response.data.expires_in_seconds}")
    else:
        print(f"❌ {type(response.failure).__name__}: {response.failure}")


async def example_client_credentials(flow: OAuth2Flow, token_url: str, client_id: str, secret: str):
    print_section("Example 1: Client Credentials")
    request = ClientCredentialsRequest(
        authorization_url=token_url, client_id=client_id, client_secret=secret
    )
    return await flow.authorize_client_credentials(request, completion=report)


async def example_refresh(flow: OAuth2Flow, token_url: str, client_id: str, secret: str, refresh_token: str):
    print_section("Example 2: Refresh")
    request = RefreshTokenRequest(
        token_url=token_url,
        client_id=client_id,
        client_secret=secret,
        refresh_token=refresh_token,
    )
    report(await flow.refresh(request))


async def example_authorization_code(flow: OAuth2Flow, client_id: str, secret: str):
    print_section("Example 3: Authorization Code")
    authorization_url = os.environ.get("OAUTH_AUTHORIZATION_URL")
    if not authorization_url:
        print("Skipped: OAUTH_AUTHORIZATION_URL is not set")
        return

    request = AuthorizationCodeRequest(
        authorization_url=authorization_url,
        token_url=os.environ["OAUTH_TOKEN_URL"],
        client_id=client_id,
        client_secret=secret,
        redirect_url=os.environ.get(
            "OAUTH_REDIRECT_URL", "http://localhost:8765/callback"
        ),
        scope="openid",
        state="example-state",
    )
    print("This will open your browser for authorization.")
    report(await flow.authorize_code(request))


async def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    token_url = os.environ["OAUTH_TOKEN_URL"]
    client_id = os.environ["OAUTH_CLIENT_ID"]
    secret = os.environ["OAUTH_CLIENT_SECRET"]

    flow = OAuth2Flow(config=EngineConfig.from_env())

    response = await example_client_credentials(flow, token_url, client_id, secret)
    if response.ok and response.data.refresh_token:
        await example_refresh(flow, token_url, client_id, secret, response.data.refresh_token)

    await example_authorization_code(flow, client_id, secret)


if __name__ == "__main__":
    asyncio.run(main())
