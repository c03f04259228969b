#!/usr/bin/env python3
"""
Simple CLI tool for running OAuth 2.0 grant flows.

This tool makes it easy to:
- Obtain tokens with the client_credentials grant
- Refresh an access token
- Run the authorization_code flow through the system browser

Usage:
    chuk-oauth2 client-credentials <token_url> --client-id ID --client-secret SECRET
    chuk-oauth2 refresh <token_url> --client-id ID --client-secret SECRET --refresh-token TOKEN
    chuk-oauth2 authorize <authorization_url> <token_url> --client-id ID --client-secret SECRET \
        --redirect-url http://localhost:8765/callback
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

from pydantic import ValidationError

from chuk_oauth2_engine import (
    AuthorizationCodeRequest,
    ClientCredentialsRequest,
    EngineConfig,
    Failure,
    LoopbackBrowserUserAgent,
    OAuth2Flow,
    RefreshTokenRequest,
    Response,
    UnexpectedServerResponse,
)


def safe_display_token(token: str, prefix_len: int = 20, suffix_len: int = 6) -> str:
    """Safely display a token with most characters redacted."""
    if len(token) <= prefix_len + suffix_len:
        return f"{token[:10]}..."

    prefix = token[:prefix_len]
    suffix = token[-suffix_len:]
    redacted_len = len(token) - prefix_len - suffix_len

    return f"{prefix}...{'*' * min(redacted_len, 20)}...{suffix}"


def print_header(text: str):
    """Print a formatted header."""
    print("\n" + "=" * 60)
    print(text)
    print("=" * 60)


def print_response(response: Response) -> int:
    """Print a flow result and return the exit code for it."""
    if isinstance(response, Failure):
        failure = response.failure
        print(f"\n❌ Authorization failed: {failure}")
        print(f"Failure Type: {type(failure).__name__}")
        if isinstance(failure, UnexpectedServerResponse) and failure.response.body:
            print(f"Response Body: {failure.response.body[:200]!r}")
        return 1

    data = response.data
    print("\n✅ Authorization successful!")
    print(f"Access Token: {safe_display_token(data.access_token)}")
    if data.expires_in_seconds is not None:
        print(f"Expires In: {data.expires_in_seconds} seconds")
    if data.refresh_token:
        print(f"Refresh Token: {safe_display_token(data.refresh_token)}")
    return 0


def build_flow(verbose: bool = False, timeout: float = 300.0) -> OAuth2Flow:
    """Create a flow engine configured from the environment."""
    config = EngineConfig.from_env()
    if verbose:
        config = config.model_copy(update={"log_http": True})
    return OAuth2Flow(
        config=config, user_agent=LoopbackBrowserUserAgent(timeout=timeout)
    )


async def cmd_client_credentials(
    token_url: str,
    client_id: str,
    client_secret: str,
    use_header: bool = True,
    scope: Optional[str] = None,
    verbose: bool = False,
):
    """Obtain tokens with the client_credentials grant."""
    print_header("Client Credentials Grant")
    print(f"Token URL: {token_url}")

    try:
        request = ClientCredentialsRequest(
            authorization_url=token_url,
            client_id=client_id,
            client_secret=client_secret,
            use_authorization_header=use_header,
            scope=scope,
        )
    except ValidationError as e:
        print(f"\n❌ Invalid request: {e}")
        return 1

    response = await build_flow(verbose).authorize_client_credentials(request)
    return print_response(response)


async def cmd_refresh(
    token_url: str,
    client_id: str,
    client_secret: str,
    refresh_token: str,
    verbose: bool = False,
):
    """Refresh an access token."""
    print_header("Refresh Token Grant")
    print(f"Token URL: {token_url}")

    try:
        request = RefreshTokenRequest(
            token_url=token_url,
            client_id=client_id,
            client_secret=client_secret,
            refresh_token=refresh_token,
        )
    except ValidationError as e:
        print(f"\n❌ Invalid request: {e}")
        return 1

    response = await build_flow(verbose).refresh(request)
    return print_response(response)


async def cmd_authorize(
    authorization_url: str,
    token_url: str,
    client_id: str,
    client_secret: str,
    redirect_url: str,
    scope: Optional[str] = None,
    state: Optional[str] = None,
    timeout: float = 300.0,
    verbose: bool = False,
):
    """Run the authorization_code flow through the system browser."""
    print_header("Authorization Code Grant")
    print(f"Authorization URL: {authorization_url}")
    print(f"Redirect URL: {redirect_url}")

    try:
        request = AuthorizationCodeRequest(
            authorization_url=authorization_url,
            token_url=token_url,
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=redirect_url,
            scope=scope,
            state=state,
        )
    except ValidationError as e:
        print(f"\n❌ Invalid request: {e}")
        return 1

    print("\n🔐 Starting OAuth flow...")
    print("This will open your browser for authorization.\n")

    response = await build_flow(verbose, timeout).authorize_code(request)
    return print_response(response)


def _add_client_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--client-id", required=True, help="OAuth client ID")
    parser.add_argument(
        "--client-secret",
        default=os.environ.get("CHUK_OAUTH2_CLIENT_SECRET"),
        help="OAuth client secret (default: $CHUK_OAUTH2_CLIENT_SECRET)",
    )


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="OAuth 2.0 grant flow CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  chuk-oauth2 client-credentials https://auth.example.com/token --client-id my-app
  chuk-oauth2 refresh https://auth.example.com/token --client-id my-app --refresh-token abc
  chuk-oauth2 authorize https://auth.example.com/authorize https://auth.example.com/token \\
      --client-id my-app --redirect-url http://localhost:8765/callback --scope "read write"
        """,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log HTTP requests and responses"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Client credentials command
    cc_parser = subparsers.add_parser(
        "client-credentials", help="Obtain tokens with the client_credentials grant"
    )
    cc_parser.add_argument("token_url", help="Token endpoint URL")
    _add_client_arguments(cc_parser)
    cc_parser.add_argument(
        "--no-auth-header",
        dest="use_header",
        action="store_false",
        help="Send credentials as parameters instead of a Basic Authorization header",
    )
    cc_parser.add_argument("--scope", help="Requested scope")

    # Refresh command
    refresh_parser = subparsers.add_parser("refresh", help="Refresh an access token")
    refresh_parser.add_argument("token_url", help="Token endpoint URL")
    _add_client_arguments(refresh_parser)
    refresh_parser.add_argument("--refresh-token", required=True, help="Refresh token")

    # Authorize command
    auth_parser = subparsers.add_parser(
        "authorize", help="Run the authorization_code flow in the browser"
    )
    auth_parser.add_argument("authorization_url", help="Authorization endpoint URL")
    auth_parser.add_argument("token_url", help="Token endpoint URL")
    _add_client_arguments(auth_parser)
    auth_parser.add_argument(
        "--redirect-url", required=True, help="Loopback redirect URL"
    )
    auth_parser.add_argument("--scope", help="Requested scope")
    auth_parser.add_argument("--state", help="Opaque state value")
    auth_parser.add_argument(
        "--timeout",
        type=float,
        default=300.0,
        help="Seconds to wait for the redirect (default: 300)",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.client_secret is None:
        print("❌ A client secret is required (--client-secret or $CHUK_OAUTH2_CLIENT_SECRET)")
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    # Execute command
    try:
        if args.command == "client-credentials":
            return asyncio.run(
                cmd_client_credentials(
                    args.token_url,
                    args.client_id,
                    args.client_secret,
                    use_header=args.use_header,
                    scope=args.scope,
                    verbose=args.verbose,
                )
            )
        elif args.command == "refresh":
            return asyncio.run(
                cmd_refresh(
                    args.token_url,
                    args.client_id,
                    args.client_secret,
                    args.refresh_token,
                    verbose=args.verbose,
                )
            )
        elif args.command == "authorize":
            return asyncio.run(
                cmd_authorize(
                    args.authorization_url,
                    args.token_url,
                    args.client_id,
                    args.client_secret,
                    args.redirect_url,
                    scope=args.scope,
                    state=args.state,
                    timeout=args.timeout,
                    verbose=args.verbose,
                )
            )
        else:  # pragma: no cover
            # This should never be reached due to argparse validation
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\n\n❌ Interrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
