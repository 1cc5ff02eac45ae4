"""
Admin login state and credential changes.

The session lives in the same key/value storage as the local collections:
``admin_logged_in`` holds ``"true"`` and ``admin_user`` a small JSON object
with the username and login time.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from zentra.db.access import AuthResult, DataAccess
from zentra.db.errors import InvalidCredentialsError
from zentra.db.models import Table
from zentra.db.stamps import now_iso
from zentra.db.storage import KeyValueStorage
from zentra.forms import CredentialsForm, LoginForm

log = logging.getLogger("zentra.auth")

LOGGED_IN_KEY = "admin_logged_in"
USER_KEY = "admin_user"


class NotAuthenticatedError(RuntimeError):
    pass


class AdminSession:
    def __init__(self, access: DataAccess, storage: KeyValueStorage):
        self.access = access
        self.storage = storage

    @property
    def is_logged_in(self) -> bool:
        return self.storage.get(LOGGED_IN_KEY) == b"true"

    @property
    def current_user(self) -> Optional[Dict[str, Any]]:
        if not self.is_logged_in:
            return None
        raw = self.storage.get(USER_KEY)
        if raw is None:
            return None
        try:
            user = json.loads(raw)
        except ValueError:
            return None
        return user if isinstance(user, dict) else None

    def _remember(self, username: str) -> None:
        self.storage.set(LOGGED_IN_KEY, b"true")
        self.storage.set(
            USER_KEY,
            json.dumps({"username": username, "loginTime": now_iso()}).encode("utf-8"),
        )

    def login(self, username: str, password: str) -> AuthResult:
        form = LoginForm(username=username, password=password)
        result = self.access.authenticate(form.username, form.password)
        self._remember(form.username)
        log.info("Admin %s logged in (%s)", form.username, result.source)
        return result

    def logout(self) -> None:
        self.storage.delete(LOGGED_IN_KEY)
        self.storage.delete(USER_KEY)

    def change_credentials(
        self,
        current_password: str,
        new_username: str,
        new_password: str,
        confirm_password: str,
    ) -> Dict[str, Any]:
        """
        Replace the admin username/password.

        The current password is checked against the stored credentials of the
        logged-in user. Raises ``NotAuthenticatedError`` without a session,
        ``InvalidCredentialsError`` for a wrong current password and pydantic
        ``ValidationError`` for a short username/password or a mismatch.
        """
        user = self.current_user
        if not user or not user.get("username"):
            raise NotAuthenticatedError("Not authenticated")

        form = CredentialsForm(
            current_password=current_password,
            new_username=new_username,
            new_password=new_password,
            confirm_password=confirm_password,
        )

        try:
            auth = self.access.authenticate(user["username"], form.current_password)
        except InvalidCredentialsError:
            raise InvalidCredentialsError("Current password is incorrect") from None

        patch = {
            "username": form.new_username,
            "password": form.new_password,
            "updated_at": now_iso(),
        }
        self.access.update(Table.ADMIN_CREDENTIALS, auth.user["id"], patch)
        self._remember(form.new_username)
        log.info("Admin credentials updated for %s", form.new_username)
        return {**auth.user, **patch}
