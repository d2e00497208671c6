from __future__ import annotations

import getpass

from anf_smb.services.errors import ValidationError


def get_password(prompt: str) -> str:
    """Read a secret from the terminal without echoing it.

    Raises:
        ValidationError: if the operator enters nothing.
    """

    password = getpass.getpass(prompt + " ")
    if not password:
        raise ValidationError("Active Directory password cannot be empty")
    return password
