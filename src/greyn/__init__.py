"""Greyn - role-based authentication for a sustainability investment platform.

Five user roles (investors, NGOs, corporates, carbon traders and admins)
sign up, log in, change passwords and delete their accounts against a
role-partitioned credential store.
"""

__version__ = "0.1.0"

from greyn.infrastructure.api.app import app

__all__ = ["app", "__version__"]
