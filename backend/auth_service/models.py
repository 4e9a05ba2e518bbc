"""
User model for the authentication service.

Users are provisioned out of band (see create_user.py); the API only reads them.
The password column holds an Argon2 hash, never the plain password.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class User:
    id: int
    username: str
    password: str = field(repr=False)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
