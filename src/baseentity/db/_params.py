"""Session factory parameters.

Internal to baseentity.db: build one with Settings.session_factory_params()
and hand it to SessionFactory. Not re-exported from the package.
"""

from dataclasses import dataclass


@dataclass
class SessionFactoryParams:
    """Everything the session factory needs to open a connection.

    No validation happens here. A bad connection string surfaces as a
    DatabaseError from the session factory, not from this record.
    """

    connection_string: str = ""
    password: str = ""
    dialect: str = "MsSql2008"
    default_schema: str = ""
    command_timeout: int = 0  # 0 means the driver's own default
    app_role_name: str = ""
    app_role_password: str = ""
