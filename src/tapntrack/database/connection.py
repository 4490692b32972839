from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database


@dataclass
class MongoConfig:
    uri: str
    database: str
    timeout_ms: int = 5000


class DatabaseConnection:
    """Singleton-like MongoDB client factory.

    Note: MongoClient is thread-safe and pools connections, so one client is
    shared by every repository and by the bulk coordinator's worker threads.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: MongoConfig):
        self._config = config
        self._client: Optional[MongoClient] = None

    @classmethod
    def get_instance(cls, config: MongoConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> MongoConfig:
        return self._config

    def connect(self) -> Database:
        if self._client is None:
            self._client = MongoClient(
                self._config.uri,
                serverSelectionTimeoutMS=self._config.timeout_ms,
                socketTimeoutMS=self._config.timeout_ms,
            )
        return self._client[self._config.database]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
