"""macOS Keychain integration using the security CLI.

Uses the `security` command-line tool that ships with macOS to store and
retrieve tokens as generic passwords.  Entries appear in Keychain
Access.app under the application namespace.
"""

from __future__ import annotations

import subprocess

from stickyboard.credentials import CredentialStore


class MacOSCredentialStore(CredentialStore):
    """Store credentials in macOS Keychain using the security CLI.

    Credentials are stored as generic passwords with:
    - Service: the namespace (e.g., "pro.aedev.stickyboard")
    - Account: slot name ("accessToken" or "refreshToken")
    - Password: the token
    """

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace

    def get(self, key: str) -> str | None:
        """Retrieve a credential from Keychain.

        If the Keychain is locked, macOS will prompt for the password via GUI.
        In headless environments without GUI, this will fail and return None.
        """
        try:
            result = subprocess.run(
                [
                    "security",
                    "find-generic-password",
                    "-a", key,
                    "-s", self.namespace,
                    "-w",  # Output password only
                ],
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError:
            # Key not found (exit code 44), or Keychain locked/inaccessible
            return None
        return result.stdout.strip() or None

    def set(self, key: str, value: str) -> None:
        """Store a credential in Keychain.

        Any existing entry is deleted first, then re-added.  The add runs
        through ``security -i`` so the secret travels on stdin rather than
        in the process arguments.
        """
        if '"' in value or "\n" in value:
            raise ValueError("Token contains characters the Keychain CLI cannot store")

        self.delete(key)

        subprocess.run(
            ["security", "-i"],
            input=(
                f'add-generic-password -a "{key}" -s "{self.namespace}" '
                f'-w "{value}" -U\n'
            ),
            capture_output=True,
            text=True,
            check=True,
        )

    def delete(self, key: str) -> None:
        """Remove a credential from Keychain.

        No-op if the credential doesn't exist.
        """
        subprocess.run(
            [
                "security",
                "delete-generic-password",
                "-a", key,
                "-s", self.namespace,
            ],
            capture_output=True,
            check=False,  # Ignore "not found" errors
        )
