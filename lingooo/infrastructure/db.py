from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.server_api import ServerApi
from ..config import settings


class MongoStore:
    """Process-wide handle on the document store.

    Constructed once by the application lifespan and closed on shutdown;
    route handlers reach the database through ``get_db``.
    """

    def __init__(self, uri: str | None = None, database: str | None = None, client: MongoClient | None = None):
        self.uri = uri or settings.mongodb_uri
        self.database_name = database or settings.DATABASE_NAME
        self._client = client

    @property
    def db(self) -> Database:
        if self._client is None:
            raise RuntimeError("Store is not open")
        return self._client[self.database_name]

    def open(self) -> "MongoStore":
        if self._client is None:
            self._client = MongoClient(
                self.uri,
                server_api=ServerApi("1", strict=True, deprecation_errors=True),
                serverSelectionTimeoutMS=5000,
            )
        return self

    def ping(self) -> None:
        self._client.admin.command("ping")

    def ensure_indexes(self) -> None:
        self.db.users.create_index([("uid", ASCENDING)], unique=True)
        self.db.flags.create_index([("name", ASCENDING)], unique=True)
        self.db.classes.create_index([("instructor.uid", ASCENDING)])

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def get_db(request: Request) -> Database:
    return request.app.state.store.db
