"""
Matrix login helper.

Logs in with a password once and prints an access token that does not use
refresh tokens, suitable for ``MATRIX_TOKEN``. Keep the created device logged
in: logging it out invalidates the token.

Usage
-----
    gh-matrix-login
    python -m gh_matrix.login --homeserver https://matrix.org --user @bot:matrix.org
"""

from __future__ import annotations

import argparse
import getpass
import sys
from typing import Any, Optional

import httpx
from dotenv import set_key

DEFAULT_HOMESERVER = "https://matrix.org"
DEFAULT_DEVICE_NAME = "GitHub Webhook Bot"
HTTP_TIMEOUT_SECONDS = 15

JSONDict = dict[str, Any]


class LoginError(Exception):
    """Raised when the homeserver rejects the login."""

    def __init__(self, error: str, errcode: Optional[str] = None):
        super().__init__(error)
        self.error = error
        self.errcode = errcode


def build_login_request(user: str, password: str, device_name: str) -> JSONDict:
    return {
        "type": "m.login.password",
        "identifier": {"type": "m.id.user", "user": user},
        "password": password,
        "initial_device_display_name": device_name,
        "refresh_token": False,
    }


def login(
    client: httpx.Client,
    homeserver: str,
    user: str,
    password: str,
    device_name: str = DEFAULT_DEVICE_NAME,
) -> JSONDict:
    """POST ``m.login.password``; returns the login response JSON."""
    url = f"{homeserver.rstrip('/')}/_matrix/client/v3/login"
    resp = client.post(url, json=build_login_request(user, password, device_name))
    if resp.status_code >= 300:
        try:
            data = resp.json()
        except ValueError:
            data = {}
        raise LoginError(data.get("error") or "Unknown error", data.get("errcode"))
    return resp.json()


def whoami(client: httpx.Client, homeserver: str, token: str) -> httpx.Response:
    url = f"{homeserver.rstrip('/')}/_matrix/client/v3/account/whoami"
    return client.get(url, headers={"Authorization": f"Bearer {token}"})


def describe_expiry(expires_in_ms: Optional[int]) -> str:
    if not expires_in_ms:
        return "No expiration set"
    hours = expires_in_ms // (1000 * 60 * 60)
    days = hours // 24
    if days > 0:
        return f"{days} days, {hours % 24} hours"
    return f"{hours} hours"


def token_preview(token: str) -> str:
    return token[:20] + "..."


def _ask(prompt: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    answer = input(f"{prompt}{suffix}: ").strip()
    return answer or default


def _confirm(prompt: str, default: bool = True) -> bool:
    hint = "Y/n" if default else "y/N"
    answer = input(f"{prompt} ({hint}): ").strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-matrix-login",
        description="Log in to Matrix and print a stable access token for MATRIX_TOKEN",
    )
    parser.add_argument("--homeserver", help=f"Homeserver URL (default: {DEFAULT_HOMESERVER})")
    parser.add_argument("--user", help='Username, e.g. "@user:matrix.org" or just "user"')
    parser.add_argument("--device-name", help=f"Device name (default: {DEFAULT_DEVICE_NAME})")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="File to store MATRIX_TOKEN in when confirmed (default: .env)",
    )
    return parser


def _print_login(result: JSONDict) -> None:
    print("\n✅ Login successful!\n")
    print("=== Login Response Details ===")
    print("User ID:", result.get("user_id"))
    print("Device ID:", result.get("device_id"))
    print("Home Server:", result.get("home_server") or "Not provided")
    print("Token expiry:", describe_expiry(result.get("expires_in_ms")))

    token = result.get("access_token") or ""
    print("\n=== Access Token ===")
    print("Access Token:", token)
    print("Token length:", len(token), "characters")
    print("Token preview:", token_preview(token))

    if result.get("refresh_token"):
        print("\n⚠️  Warning: Server provided a refresh token despite our request.")
        print("This may indicate the server requires token refresh.")


def _check_token(client: httpx.Client, homeserver: str, token: str) -> None:
    print("\n=== Testing Token ===")
    try:
        resp = whoami(client, homeserver, token)
    except httpx.HTTPError as exc:
        print("❌ Failed to test token:", exc)
        return
    if resp.status_code < 300:
        data = resp.json()
        print("✅ Token test successful!")
        print("Verified user:", data.get("user_id"))
        print("Device ID:", data.get("device_id"))
    else:
        print("❌ Token test failed!")
        print("Status:", resp.status_code)
        print("Error:", resp.text)


def main(argv: Optional[list[str]] = None, client: Optional[httpx.Client] = None) -> int:
    args = create_parser().parse_args(argv)

    print("Matrix Login Script")
    print("==================\n")

    homeserver = args.homeserver or _ask("Homeserver URL", DEFAULT_HOMESERVER)
    user = args.user or _ask('Username (e.g., @user:matrix.org or just "user")')
    password = getpass.getpass("Password: ")
    device_name = args.device_name or _ask("Device name", DEFAULT_DEVICE_NAME)

    if not user or not password:
        print("Username and password are required.")
        return 1

    own_client = client is None
    if client is None:
        client = httpx.Client(timeout=HTTP_TIMEOUT_SECONDS)
    try:
        print("\nLogging in...")
        try:
            result = login(client, homeserver, user, password, device_name)
        except LoginError as exc:
            print("\nLogin failed!")
            print("Error:", exc.error)
            if exc.errcode:
                print("Error code:", exc.errcode)
            return 1
        except httpx.HTTPError as exc:
            print("\nError:", exc)
            return 1

        _print_login(result)
        token = result.get("access_token") or ""
        _check_token(client, homeserver, token)
    finally:
        if own_client:
            client.close()

    if _confirm(f"Do you want to store this token as MATRIX_TOKEN in {args.env_file}?"):
        set_key(args.env_file, "MATRIX_TOKEN", token)
        print(f"\n✅ Token saved to {args.env_file}")

    print("\n📌 Important: Keep this device logged in to maintain token validity.")
    print(f'📌 Do not log out from "{device_name}" or the token will be invalidated.')
    return 0


if __name__ == "__main__":
    sys.exit(main())
