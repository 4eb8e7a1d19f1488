import logging
import threading
from typing import Dict, Optional

from contact_import.domain.imports.models import ImportSession

logger = logging.getLogger(__name__)


class ImportSessionStore:
    """
    In-memory registry of import sessions awaiting confirmation.

    Sessions live from upload until the operator closes the import dialog.
    """

    def __init__(self):
        self._sessions: Dict[str, ImportSession] = {}
        self._lock = threading.Lock()

    def add(self, session: ImportSession) -> ImportSession:
        with self._lock:
            self._sessions[session.id] = session
        logger.info(f"Registered import session {session.id}")
        return session

    def get(self, session_id: str) -> Optional[ImportSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: str) -> Optional[ImportSession]:
        """Remove a session, cancelling it when it has not started yet."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            session.cancel()
            logger.info(f"Discarded import session {session_id} ({session.status.value})")
        return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


session_store = ImportSessionStore()
