"""Shared base class for API tests: app wired to a fresh in-memory SQLite database per test."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.security import hash_password
from app.main import app
from app.models import Base, User, UserLevel

DEFAULT_PASSWORD = "s3cret-pass"


class ApiTestCase(unittest.TestCase):
    """TestClient against the real app; get_db is overridden to an isolated SQLite database."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

        def override_get_db() -> Generator[Session, None, None]:
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def make_user(
        self,
        username: str | None,
        password: str | None = DEFAULT_PASSWORD,
        level: UserLevel = UserLevel.BASIC,
        active: bool = True,
        name: str | None = None,
    ) -> User:
        """Insert a user directly into the store (bypassing the API)."""
        with self.session_factory() as db:
            user = User(
                name=name,
                username=username,
                password_hash=hash_password(password) if password else None,
                level=level,
                active=active,
            )
            db.add(user)
            db.commit()
            return user

    def fetch_user(self, user_id: int) -> User | None:
        with self.session_factory() as db:
            return db.get(User, user_id)

    def count_users(self) -> int:
        with self.session_factory() as db:
            return db.query(User).count()

    def login(self, username: str, password: str = DEFAULT_PASSWORD) -> str:
        resp = self.client.post("/api/auth/login", json={"username": username, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["token"]

    def auth_headers(self, username: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.login(username, password)}"}
