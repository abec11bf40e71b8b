"""TokenGate quickstart example

This script walks one session through its whole lifecycle:
1. Log in
2. Check the token and call protected endpoints
3. Log out
4. Confirm the token no longer works
"""
import os

from tokengate_client import TokenGateClient, TokenGateError

# Configuration
BACKEND_URL = os.getenv("TOKENGATE_URL", "http://localhost:8000")
USERNAME = os.getenv("TOKENGATE_USERNAME", "admin")
PASSWORD = os.getenv("TOKENGATE_PASSWORD", "admin123")


def main():
    print("=" * 60)
    print("TokenGate Quickstart Demo")
    print("=" * 60)
    print()

    client = TokenGateClient(base_url=BACKEND_URL)

    # Step 1: Log in
    print("1. Logging in...")
    session = client.login(USERNAME, PASSWORD)
    print(f"   ✓ Logged in as {session['username']} ({session['role']})")
    print(f"   ✓ Token expires at {session['expiresAt']}")
    print()

    # Step 2: Use the token
    print("2. Calling protected endpoints...")
    print(f"   ✓ Token valid: {client.validate()}")
    print(f"   ✓ {client.get_user_info()['message']}")
    try:
        admin_data = client.get_admin_data()
        print(f"   ✓ Admin data: {admin_data['secretInfo']}")
    except TokenGateError as exc:
        print(f"   ✗ Admin data refused: {exc.message}")
    print()

    # Step 3: Log out, keeping a copy of the token to show it is dead
    print("3. Logging out...")
    old_token = client.token
    client.logout()
    print("   ✓ Logged out")
    print()

    # Step 4: The old token is rejected
    print("4. Re-using the old token...")
    client.token = old_token
    print(f"   ✓ Token valid: {client.validate()}")
    print()


if __name__ == "__main__":
    main()
