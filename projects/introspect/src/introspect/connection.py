"""Connection string handling for the source database."""

from sqlalchemy import URL, Engine, create_engine

DRIVER = "mysql+pymysql"
DEFAULT_PORT = 3306
EXPECTED_FORMAT = "user:password@host:port"


class ConnectionStringError(ValueError):
    """Raised when a connection string is not user:password@host:port."""


def connection_url(connection: str, database: str) -> URL:
    """Build a SQLAlchemy URL from a ``user:password@host:port`` string."""
    credentials, separator, address = connection.rpartition("@")
    if not separator or not credentials or not address:
        msg = f"Invalid connection string {connection!r}, expected {EXPECTED_FORMAT}"
        raise ConnectionStringError(msg)

    username, _, password = credentials.partition(":")
    host, _, port = address.partition(":")
    if not username or not host:
        msg = f"Invalid connection string {connection!r}, expected {EXPECTED_FORMAT}"
        raise ConnectionStringError(msg)

    try:
        port_number = int(port) if port else DEFAULT_PORT
    except ValueError as err:
        msg = f"Invalid port in connection string: {port!r}"
        raise ConnectionStringError(msg) from err

    return URL.create(
        DRIVER,
        username=username,
        password=password or None,
        host=host,
        port=port_number,
        database=database,
    )


def connect(connection: str, database: str) -> Engine:
    """Create an engine for the given connection string and database."""
    return create_engine(connection_url(connection, database), pool_pre_ping=True)
