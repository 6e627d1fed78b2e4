"""Secure password generator and clipboard utilities."""

import secrets
import string
from dataclasses import dataclass

import pyperclip

SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
FALLBACK_CHARSET = string.ascii_lowercase
DEFAULT_LEN = 16
MIN_LEN = 8
MAX_LEN = 32


@dataclass
class GenOptions:
    length: int = DEFAULT_LEN
    upper: bool = True
    lower: bool = True
    digits: bool = True
    symbols: bool = True


def build_charset(opts: GenOptions) -> str:
    """Concatenate enabled classes in upper, lower, digits, symbols order."""
    charset = ""
    if opts.upper:
        charset += string.ascii_uppercase
    if opts.lower:
        charset += string.ascii_lowercase
    if opts.digits:
        charset += string.digits
    if opts.symbols:
        charset += SYMBOLS

    return charset or FALLBACK_CHARSET


def clamp_length(length: int) -> int:
    """Clamp a requested length into the supported [MIN_LEN, MAX_LEN] range."""
    return max(MIN_LEN, min(MAX_LEN, length))


def generate_password(opts: GenOptions) -> str:
    if opts.length < 1:
        raise ValueError("Password length must be at least 1.")

    charset = build_charset(opts)
    return "".join(secrets.choice(charset) for _ in range(opts.length))


def copy_to_clipboard(text: str) -> bool:
    """Copy text to clipboard. Returns True on success, False on failure."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException:
        return False
    return True
