"""Aurora PostgreSQL client: connection management for the tracking log."""

import json

import boto3
import psycopg

from tracklog.config import Config
from tracklog.errors import ErrorCode, StorageError


class AuroraClient:
    def __init__(self, config: Config) -> None:
        self._config = config
        self._conn: psycopg.Connection | None = None
        self._secret_cache: dict[str, str] | None = None

    def _get_credentials(self) -> dict[str, str]:
        if self._config.aurora_secret_arn:
            if self._secret_cache is None:
                client = boto3.client("secretsmanager", region_name=self._config.aws_region)
                secret = client.get_secret_value(SecretId=self._config.aurora_secret_arn)
                self._secret_cache = json.loads(secret["SecretString"])
            return self._secret_cache
        return {
            "host": self._config.aurora_host,
            "port": str(self._config.aurora_port),
            "dbname": self._config.aurora_database,
            "user": self._config.aurora_user,
            "password": self._config.aurora_password,
        }

    def connect(self) -> None:
        creds = self._get_credentials()
        try:
            # Writes open explicit transactions; plain reads never hold one open.
            self._conn = psycopg.connect(
                host=creds.get("host", self._config.aurora_host),
                port=int(creds.get("port", self._config.aurora_port)),
                dbname=creds.get("dbname", self._config.aurora_database),
                user=creds.get("username", creds.get("user", self._config.aurora_user)),
                password=creds.get("password", self._config.aurora_password),
                autocommit=True,
            )
        except psycopg.Error as e:
            raise StorageError(f"Could not connect to Aurora: {e}") from e

    def disconnect(self) -> None:
        if self._conn and not self._conn.closed:
            self._conn.close()
        self._conn = None

    def require_connection(self) -> psycopg.Connection:
        """Return the active connection or raise if not connected."""
        if self._conn is None or self._conn.closed:
            raise StorageError(
                "AuroraClient is not connected. Call connect() first.",
                code=ErrorCode.NOT_CONNECTED,
            )
        return self._conn

    def health_check(self) -> bool:
        try:
            conn = self.require_connection()
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
            return True
        except Exception:
            return False

    def __enter__(self) -> "AuroraClient":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()
