"""SQLite-based sink for session context, messages and token usage."""

import sqlite3
import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional, List, Dict, Any

from .models import SessionContext, StoredMessage, UsageTotals
from schemas.conversation import ConversationMessage
from schemas.usage import TokenUsage, CostCalculation

logger = logging.getLogger(__name__)


class SQLiteSessionStore:
    """SQLite-based persistent session store."""

    def __init__(self, db_path: str = "data/sessions.db"):
        """
        Initialize SQLite session store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize database schema."""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS sessions (
                session_id TEXT PRIMARY KEY,
                email TEXT NOT NULL,
                name TEXT,
                company_url TEXT,
                role TEXT,
                role_confidence REAL DEFAULT 0,
                research TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS messages (
                message_id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id TEXT NOT NULL,
                role TEXT NOT NULL CHECK(role IN ('user', 'assistant')),
                content TEXT NOT NULL,
                timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (session_id) REFERENCES sessions(session_id)
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS token_usage (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id TEXT NOT NULL,
                provider TEXT NOT NULL,
                model TEXT NOT NULL,
                input_tokens INTEGER DEFAULT 0,
                output_tokens INTEGER DEFAULT 0,
                total_cost REAL DEFAULT 0,
                metadata TEXT,
                timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_messages_session ON messages(session_id)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_usage_session ON token_usage(session_id)"
        )

        conn.commit()
        conn.close()
        logger.info(f"Database initialized at {self.db_path}")

    def create_session(
        self,
        session_id: str,
        email: str,
        name: Optional[str] = None,
        company_url: Optional[str] = None
    ) -> SessionContext:
        """
        Create (or reset) a session.

        Args:
            session_id: Unique session ID
            email: Visitor email
            name: Optional visitor name
            company_url: Optional company URL

        Returns:
            Created SessionContext
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        now = datetime.now().isoformat()

        cursor.execute(
            """
            INSERT OR REPLACE INTO sessions
            (session_id, email, name, company_url, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (session_id, email, name, company_url, now, now)
        )

        conn.commit()
        conn.close()

        return SessionContext(
            session_id=session_id,
            email=email,
            name=name,
            company_url=company_url,
            created_at=now,
            updated_at=now
        )

    def get_session(self, session_id: str) -> Optional[SessionContext]:
        """
        Get a session snapshot.

        Args:
            session_id: Session ID

        Returns:
            SessionContext or None if not found
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(
            "SELECT * FROM sessions WHERE session_id = ?",
            (session_id,)
        )
        row = cursor.fetchone()
        conn.close()

        if not row:
            return None

        return SessionContext(
            session_id=row["session_id"],
            email=row["email"],
            name=row["name"],
            company_url=row["company_url"],
            role=row["role"],
            role_confidence=row["role_confidence"] or 0.0,
            research=json.loads(row["research"]) if row["research"] else None,
            created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else datetime.now(),
            updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else datetime.now()
        )

    def update_role(
        self,
        session_id: str,
        role: str,
        role_confidence: float,
        research: Optional[Dict[str, Any]] = None
    ):
        """
        Record the detected role (and research snapshot) for a session.

        Args:
            session_id: Session ID
            role: Detected role label
            role_confidence: Detection confidence
            research: Optional research signal snapshot
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(
            """
            UPDATE sessions
            SET role = ?, role_confidence = ?, research = ?, updated_at = ?
            WHERE session_id = ?
            """,
            (
                role,
                role_confidence,
                json.dumps(research) if research else None,
                datetime.now().isoformat(),
                session_id
            )
        )

        conn.commit()
        conn.close()

    def add_message(self, session_id: str, role: str, content: str) -> StoredMessage:
        """
        Append a message to a session.

        Args:
            session_id: Session ID
            role: "user" or "assistant"
            content: Message content

        Returns:
            Created StoredMessage
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        now = datetime.now().isoformat()

        cursor.execute(
            """
            INSERT INTO messages (session_id, role, content, timestamp)
            VALUES (?, ?, ?, ?)
            """,
            (session_id, role, content, now)
        )
        message_id = cursor.lastrowid

        cursor.execute(
            "UPDATE sessions SET updated_at = ? WHERE session_id = ?",
            (now, session_id)
        )

        conn.commit()
        conn.close()

        return StoredMessage(
            message_id=message_id,
            session_id=session_id,
            role=role,
            content=content,
            timestamp=now
        )

    def get_messages(self, session_id: str, limit: Optional[int] = None) -> List[ConversationMessage]:
        """
        Get a session's history in chronological order.

        Args:
            session_id: Session ID
            limit: Optional cap on the number of most recent messages

        Returns:
            List of ConversationMessage
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(
            """
            SELECT role, content, timestamp
            FROM messages
            WHERE session_id = ?
            ORDER BY message_id DESC
            LIMIT ?
            """,
            (session_id, limit if limit is not None else -1)
        )
        rows = cursor.fetchall()
        conn.close()

        return [
            ConversationMessage(
                role=row["role"],
                content=row["content"],
                timestamp=datetime.fromisoformat(row["timestamp"]) if row["timestamp"] else None
            )
            for row in reversed(rows)  # Reverse to get chronological order
        ]

    def log_token_usage(
        self,
        session_id: str,
        provider: str,
        model: str,
        usage: TokenUsage,
        cost: CostCalculation,
        metadata: Optional[Dict[str, Any]] = None
    ):
        """
        Record one model call's token usage and cost.

        Args:
            session_id: Session ID
            provider: Provider name
            model: Model name
            usage: Token counts
            cost: Calculated cost
            metadata: Optional extra fields (feature, cache use)
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(
            """
            INSERT INTO token_usage
            (session_id, provider, model, input_tokens, output_tokens, total_cost, metadata, timestamp)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                session_id,
                provider,
                model,
                usage.input_tokens,
                usage.output_tokens,
                cost.total_cost,
                json.dumps(metadata) if metadata else None,
                datetime.now().isoformat()
            )
        )

        conn.commit()
        conn.close()

    def get_usage_totals(self, session_id: str) -> UsageTotals:
        """
        Aggregate token usage for a session.

        Args:
            session_id: Session ID

        Returns:
            UsageTotals (zeros when nothing was logged)
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(
            """
            SELECT COUNT(*) AS calls,
                   COALESCE(SUM(input_tokens), 0) AS input_tokens,
                   COALESCE(SUM(output_tokens), 0) AS output_tokens,
                   COALESCE(SUM(total_cost), 0) AS total_cost
            FROM token_usage
            WHERE session_id = ?
            """,
            (session_id,)
        )
        row = cursor.fetchone()
        conn.close()

        return UsageTotals(
            session_id=session_id,
            calls=row["calls"],
            input_tokens=row["input_tokens"],
            output_tokens=row["output_tokens"],
            total_cost=row["total_cost"]
        )
