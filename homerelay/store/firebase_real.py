"""Firebase Realtime Database store (firebase-admin)."""

import threading
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import credentials, db
from firebase_admin import exceptions as firebase_exceptions

from homerelay.config import (
    FIREBASE_APP_NAME,
    FIREBASE_CREDENTIALS,
    FIREBASE_DATABASE_URL,
    MESSAGE_FIELD,
)
from homerelay.errors import ConfigError, StoreConnectionError
from homerelay.models import ChangeEvent, StoreError
from homerelay.store.mapping import apply_event, build_record
from homerelay.store.protocol import OnChange, OnError
from homerelay.utils.logger import get_logger

logger = get_logger("homerelay.store.firebase")

# Stream events that end the listener: rules revoked read access, or the credential expired.
ERROR_EVENT_CODES = {
    "cancel": "permission_denied",
    "auth_revoked": "auth_revoked",
}
STREAM_ERROR = "stream_error"


def _error_code(e: Exception) -> str:
    code = getattr(e, "code", None)
    return str(code).lower() if code else STREAM_ERROR


class FirebaseSubscription:
    """One ReferenceListener plus the local mirror of the watched record.

    The SDK streams put/patch events relative to the watched path; they are
    folded into the mirror so on_change always sees the whole record.
    Callbacks run on the SDK's listener thread.
    """

    def __init__(
        self,
        path: str,
        on_change: OnChange,
        on_error: OnError,
        message_field: str = MESSAGE_FIELD,
    ):
        self.path = path
        self._on_change = on_change
        self._on_error = on_error
        self._message_field = message_field
        self._record: Any = None
        self._lock = threading.Lock()
        self._registration: Any = None
        self._closed = False

    def attach(self, reference: Any) -> None:
        """Open the stream on reference. Read failures are reported to on_error, not raised."""
        try:
            self._registration = reference.listen(self.handle_event)
        except firebase_exceptions.FirebaseError as e:
            logger.error("store.firebase.listen_failed", path=self.path, error=str(e))
            self._on_error(StoreError(code=_error_code(e), path=self.path, detail=str(e)))
            return
        logger.info("store.firebase.listening", path=self.path)

    def handle_event(self, event: Any) -> None:
        """SDK callback: fold data events, map cancel/auth_revoked to on_error."""
        if self._closed:
            return
        try:
            event_type = event.event_type
            if event_type in ERROR_EVENT_CODES:
                logger.warning("store.firebase.stream_closed", path=self.path, event_type=event_type)
                self._on_error(StoreError(code=ERROR_EVENT_CODES[event_type], path=self.path))
                return
            if event_type not in ("put", "patch"):
                logger.debug("store.firebase.skip_event", path=self.path, event_type=event_type)
                return
            with self._lock:
                self._record = apply_event(self._record, event_type, event.path, event.data)
                snapshot = ChangeEvent.from_record(self.path, self._record, self._message_field)
            logger.debug(
                "store.firebase.event",
                path=self.path,
                event_type=event_type,
                event_path=event.path,
            )
            self._on_change(snapshot)
        except Exception as e:
            logger.exception("store.firebase.event_error", path=self.path, error=str(e))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._registration is not None:
            self._registration.close()
            self._registration = None
        logger.info("store.firebase.closed", path=self.path)


class FirebaseStore:
    """Firebase Realtime Database access through an initialised firebase_admin App."""

    def __init__(self, app: Any, message_field: str = MESSAGE_FIELD):
        self._app = app
        self._message_field = message_field

    @classmethod
    def from_config(
        cls,
        database_url: str = FIREBASE_DATABASE_URL,
        credentials_path: str | Path = FIREBASE_CREDENTIALS,
        app_name: str = FIREBASE_APP_NAME,
        message_field: str = MESSAGE_FIELD,
    ) -> "FirebaseStore":
        """Load the service-account key and initialise a named App once at startup."""
        if not database_url:
            raise ConfigError("FIREBASE_DATABASE_URL is not set")
        try:
            cred = credentials.Certificate(str(credentials_path))
        except (OSError, ValueError) as e:
            raise StoreConnectionError(f"Cannot load Firebase credentials from {credentials_path}: {e}") from e
        try:
            app = firebase_admin.initialize_app(cred, {"databaseURL": database_url}, name=app_name)
        except ValueError as e:
            raise StoreConnectionError(f"Cannot initialise Firebase app {app_name!r}: {e}") from e
        logger.info("store.firebase.init", database_url=database_url, app_name=app_name)
        return cls(app, message_field=message_field)

    def _reference(self, path: str) -> Any:
        return db.reference(path, app=self._app)

    def listen(self, path: str, on_change: OnChange, on_error: OnError) -> FirebaseSubscription:
        subscription = FirebaseSubscription(path, on_change, on_error, message_field=self._message_field)
        subscription.attach(self._reference(path))
        return subscription

    def set_message(self, path: str, text: str) -> dict[str, Any]:
        record = build_record(text, self._message_field)
        self._reference(path).set(record)
        logger.info("store.firebase.set_message", path=path, text=text)
        return record

    def close(self) -> None:
        """Release the App (and its HTTP sessions)."""
        firebase_admin.delete_app(self._app)
        logger.info("store.firebase.app_deleted")
