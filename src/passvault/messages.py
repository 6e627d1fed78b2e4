"""User messages for PassVault."""

# Success messages
SUCCESS_ADDED = "Added entry for '{website}' (id {id})."
SUCCESS_DELETED = "Deleted entry {id}."
SUCCESS_UPDATED = "Updated entry {id}."
SUCCESS_CREATED = "Vault created at {path}"

# Error messages
ERROR_NOT_FOUND = "Entry '{id}' not found."
ERROR_LOCKED = "Vault is locked."
ERROR_GENERIC = "Error: {error}"
ERROR_OPEN_FAILED = "Could not open vault: {error}"
ERROR_SAVE_FAILED = "Could not save vault: {error}"
ERROR_TOO_MANY_ATTEMPTS = "Maximum attempts exceeded"
ERROR_MUTUALLY_EXCLUSIVE_GEN = (
    "Cannot use --generate together with a manual password. "
    "Provide either --password or --generate."
)

# Info messages
INFO_NO_ENTRIES = "No entries found."
INFO_NO_MATCHES = "No entries found matching '{query}'."
INFO_CANCELLED = "Operation cancelled."
INFO_COPIED = "Password copied to clipboard."
INFO_CLIPBOARD_UNAVAILABLE = "Clipboard unavailable"
