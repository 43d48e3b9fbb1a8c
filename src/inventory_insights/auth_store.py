from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from .models import SessionData

logger = logging.getLogger(__name__)


@dataclass
class TokenStore:
    """Bearer token plus a cached profile, persisted between runs.

    The cached profile is only a hint; the session store revalidates the token
    against the service before trusting it.
    """

    app_name: str = "inventory-insights"
    filename: str = "session.json"
    base_dir: Path | None = None

    def _path(self) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, "InventoryInsights"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def save(self, session: SessionData) -> None:
        path = self._path()
        path.write_text(session.model_dump_json(indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            logger.debug("token_store_chmod_unsupported", extra={"path": str(path)})

    def load(self) -> SessionData | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            logger.warning("token_store_corrupt", extra={"path": str(path)})
            self.clear()
            return None
        try:
            return SessionData.model_validate(data)
        except PydanticValidationError:
            logger.warning("token_store_invalid", extra={"path": str(path)})
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()
