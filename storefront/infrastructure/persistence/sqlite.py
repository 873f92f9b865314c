import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional

from ...domain.errors import ConflictError, NotFoundError, UnexpectedError
from ...domain.models import AccountToken, Product, TokenPurpose, User
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        self._conn.execute("PRAGMA foreign_keys = ON")
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE COLLATE NOCASE,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    is_verified INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS account_tokens (
                    value TEXT PRIMARY KEY,
                    purpose TEXT NOT NULL,
                    user_id INTEGER NOT NULL,
                    expires_at TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_account_tokens_user_purpose
                    ON account_tokens(user_id, purpose);

                CREATE TABLE IF NOT EXISTS products (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    price REAL NOT NULL,
                    image TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as exc:
            logger.exception("SQLite failure while trying to %s", action)
            raise UnexpectedError(f"Failed to {action}.") from exc

    # UserRepository API ----------------------------------------------------
    def find_user_by_id(self, user_id: int) -> User:
        return self._fetch_user("SELECT * FROM users WHERE id = ?", (user_id,))

    def find_user_by_username(self, username: str) -> User:
        return self._fetch_user("SELECT * FROM users WHERE username = ?", (username.strip(),))

    def find_user_by_email(self, email: str) -> User:
        return self._fetch_user("SELECT * FROM users WHERE email = ?", (email.strip().lower(),))

    def insert_user(self, username: str, email: str, password_hash: str) -> User:
        now = self._now()
        try:
            with self._guard("create user"), self._lock, self._conn:
                cur = self._conn.execute(
                    """
                    INSERT INTO users (username, email, password_hash, is_verified, created_at, updated_at)
                    VALUES (?, ?, ?, 0, ?, ?)
                    """,
                    (username.strip(), email.strip().lower(), password_hash, now, now),
                )
                user_id = cur.lastrowid
                cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
                row = cur.fetchone()
        except sqlite3.IntegrityError as exc:
            if "users.email" in str(exc):
                raise ConflictError("Email already exists") from exc
            raise ConflictError("Username already exists") from exc
        if not row:
            raise UnexpectedError("Failed to persist user.")
        return self._row_to_user(row)

    def update_user(
        self,
        user_id: int,
        *,
        password_hash: Optional[str] = None,
        is_verified: Optional[bool] = None,
    ) -> User:
        updates = []
        params: List[Any] = []
        if password_hash is not None:
            updates.append("password_hash = ?")
            params.append(password_hash)
        if is_verified is not None:
            updates.append("is_verified = ?")
            params.append(int(is_verified))

        if updates:
            updates.append("updated_at = ?")
            params.append(self._now())
            params.append(user_id)
            statement = f"UPDATE users SET {', '.join(updates)} WHERE id = ?"
            with self._guard("update user"), self._lock, self._conn:
                self._conn.execute(statement, params)
        return self.find_user_by_id(user_id)

    def list_users(self) -> List[User]:
        with self._guard("list users"), self._lock:
            cur = self._conn.execute("SELECT * FROM users ORDER BY id ASC")
            rows = cur.fetchall()
        return [self._row_to_user(row) for row in rows]

    def _fetch_user(self, query: str, params: tuple) -> User:
        with self._guard("load user"), self._lock:
            cur = self._conn.execute(query, params)
            row = cur.fetchone()
        if not row:
            raise NotFoundError("User not found")
        return self._row_to_user(row)

    # TokenRepository API ---------------------------------------------------
    def insert_token(
        self,
        value: str,
        purpose: TokenPurpose,
        user_id: int,
        expires_at: datetime,
    ) -> AccountToken:
        now = self._now()
        with self._guard("store token"), self._lock, self._conn:
            self._conn.execute(
                """
                INSERT INTO account_tokens (value, purpose, user_id, expires_at, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (value, purpose.value, user_id, self._format_datetime(expires_at), now),
            )
        return AccountToken(
            value=value,
            purpose=purpose,
            user_id=user_id,
            expires_at=self._parse_datetime(self._format_datetime(expires_at)),
            created_at=self._parse_datetime(now),
        )

    def find_token(self, value: str, purpose: TokenPurpose) -> AccountToken:
        with self._guard("load token"), self._lock:
            cur = self._conn.execute(
                "SELECT * FROM account_tokens WHERE value = ? AND purpose = ?",
                (value, purpose.value),
            )
            row = cur.fetchone()
        if not row:
            raise NotFoundError("Invalid token")
        return self._row_to_token(row)

    def consume_token(self, value: str, purpose: TokenPurpose) -> AccountToken:
        with self._guard("consume token"), self._lock, self._conn:
            cur = self._conn.execute(
                "SELECT * FROM account_tokens WHERE value = ? AND purpose = ?",
                (value, purpose.value),
            )
            row = cur.fetchone()
            if row:
                self._conn.execute("DELETE FROM account_tokens WHERE value = ?", (value,))
        if not row:
            raise NotFoundError("Invalid token")
        return self._row_to_token(row)

    def delete_tokens(self, user_id: int, purpose: TokenPurpose) -> int:
        with self._guard("delete tokens"), self._lock, self._conn:
            cur = self._conn.execute(
                "DELETE FROM account_tokens WHERE user_id = ? AND purpose = ?",
                (user_id, purpose.value),
            )
            return cur.rowcount

    # ProductRepository API -------------------------------------------------
    def insert_product(
        self,
        name: str,
        description: str,
        price: float,
        image: Optional[str],
    ) -> Product:
        now = self._now()
        with self._guard("create product"), self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO products (name, description, price, image, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (name, description, price, image, now, now),
            )
            product_id = cur.lastrowid
            cur = self._conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = cur.fetchone()
        if not row:
            raise UnexpectedError("Failed to persist product.")
        return self._row_to_product(row)

    def find_product(self, product_id: int) -> Product:
        with self._guard("load product"), self._lock:
            cur = self._conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = cur.fetchone()
        if not row:
            raise NotFoundError("Product not found")
        return self._row_to_product(row)

    def list_products(self) -> List[Product]:
        with self._guard("list products"), self._lock:
            cur = self._conn.execute("SELECT * FROM products ORDER BY id ASC")
            rows = cur.fetchall()
        return [self._row_to_product(row) for row in rows]

    def update_product(
        self,
        product_id: int,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[float] = None,
        image: Optional[str] = None,
    ) -> Product:
        updates = []
        params: List[Any] = []
        if name is not None:
            updates.append("name = ?")
            params.append(name)
        if description is not None:
            updates.append("description = ?")
            params.append(description)
        if price is not None:
            updates.append("price = ?")
            params.append(price)
        if image is not None:
            updates.append("image = ?")
            params.append(image)

        if updates:
            updates.append("updated_at = ?")
            params.append(self._now())
            params.append(product_id)
            statement = f"UPDATE products SET {', '.join(updates)} WHERE id = ?"
            with self._guard("update product"), self._lock, self._conn:
                self._conn.execute(statement, params)
        return self.find_product(product_id)

    def delete_product(self, product_id: int) -> None:
        with self._guard("delete product"), self._lock, self._conn:
            cur = self._conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
            deleted = cur.rowcount
        if not deleted:
            raise NotFoundError("Product not found")

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def _format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            is_verified=bool(row["is_verified"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_token(self, row: sqlite3.Row) -> AccountToken:
        return AccountToken(
            value=row["value"],
            purpose=TokenPurpose(row["purpose"]),
            user_id=row["user_id"],
            expires_at=self._parse_datetime(row["expires_at"]),
            created_at=self._parse_datetime(row["created_at"]),
        )

    def _row_to_product(self, row: sqlite3.Row) -> Product:
        return Product(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            price=row["price"],
            image=row["image"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
