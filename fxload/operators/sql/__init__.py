"""Generic SQL session for SQLAlchemy-based databases.

SQLSession runs fixture loads on any database SQLAlchemy can connect
to. Engine-specific behavior lives in the dialects of the sibling
packages.
"""

from fxload.operators.sql.session import SQLSession

__all__ = ["SQLSession"]
