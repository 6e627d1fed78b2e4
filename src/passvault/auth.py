"""Authentication utilities for secure master password handling."""

import getpass
import os
import sys

from .config import Config

MASTER_PASSWORD_ENV = "PASSVAULT_MASTER_PASSWORD"


def get_master_password(
    prompt: str = "Enter master password: ", confirm: bool = False
) -> str:
    """Securely prompt for master password without echo."""
    env_password = os.getenv(MASTER_PASSWORD_ENV)
    if env_password is not None:
        return env_password

    try:
        password = getpass.getpass(prompt)

        if confirm:
            password_confirm = getpass.getpass("Confirm master password: ")
            if password != password_confirm:
                raise ValueError("Passwords do not match")

        return password

    except (KeyboardInterrupt, EOFError):
        print("\nPassword prompt cancelled", file=sys.stderr)
        raise


def validate_new_master_password(password: str) -> str:
    """Reject master passwords shorter than the configured minimum."""
    if len(password) < Config.MIN_MASTER_PASSWORD_LENGTH:
        raise ValueError(
            f"Master password must be at least "
            f"{Config.MIN_MASTER_PASSWORD_LENGTH} characters"
        )
    return password


def prompt_create_master_password() -> str:
    """Prompt user to create a new master password with confirmation."""
    print("\nCreating encrypted vault - you will need a master password.", file=sys.stderr)
    print(
        "IMPORTANT: Choose a strong password you will remember. "
        "If lost, vault cannot be recovered.",
        file=sys.stderr,
    )
    password = get_master_password(prompt="Create master password: ", confirm=True)
    return validate_new_master_password(password)


def prompt_unlock_vault() -> str:
    """Prompt user to unlock existing vault with master password."""
    return get_master_password(prompt="Enter master password to unlock vault: ")
