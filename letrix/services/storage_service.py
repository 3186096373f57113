"""
Storage Service

Persistence collaborators for round snapshots and stats. Authenticated
players are stored in MongoDB; anonymous players, and anyone whose cloud
read or write fails, fall back to the local store. Malformed saved data is
treated as absent, never as an error.
"""

import json
import re
import datetime
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..models.game import RoundSessionState, StateValidationError, parse_round_state
from ..models.stats import GameStats
from ..utils.game_logger import game_logger


class PersistenceError(Exception):
    """Raised by a storage backend when a read or write could not be completed."""


@dataclass(frozen=True)
class ScopeKey:
    """
    Identifies one saved round or stats record.

    Daily modes carry the puzzle date; unlimited mode leaves it out so a
    round can continue across calendar days.
    """
    player_id: str
    language: str
    mode_name: str
    puzzle_date: Optional[str] = None
    authenticated: bool = False

    @property
    def storage_key(self) -> str:
        key = f"{self.player_id}/{self.mode_name}-{self.language}"
        if self.puzzle_date:
            key += f":{self.puzzle_date}"
        return key

    def stats_scope(self) -> 'ScopeKey':
        return ScopeKey(self.player_id, self.language, self.mode_name, None, self.authenticated)


def create_mongo_database(mongo_uri: str, db_name: str):
    """
    Connect to MongoDB and return the database handle.

    Raises:
        PyMongoError: If the server cannot be reached
    """
    client = MongoClient(mongo_uri, server_api=ServerApi('1'))
    client.admin.command('ping')
    return client[db_name]


class LocalStateStore:
    """
    JSON blob per scope key holding ``state`` and ``stats``.

    Blobs are cached in memory, most recently used last, and mirrored to
    ``<data_dir>/<key>.json`` when a data directory is configured. Without
    a data directory the cache is the only copy, so evicting a blob drops
    that save.
    """

    def __init__(self, data_dir: Optional[str] = None, max_cached: int = 10000):
        self.data_dir = Path(data_dir) if data_dir else None
        if self.data_dir:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        self.max_cached = max_cached
        self._blobs: 'OrderedDict[str, bytes]' = OrderedDict()

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{re.sub(r'[^A-Za-z0-9_.-]', '_', key)}.json"

    def _cache(self, key: str, raw: bytes) -> None:
        self._blobs[key] = raw
        self._blobs.move_to_end(key)
        while len(self._blobs) > self.max_cached:
            self._blobs.popitem(last=False)

    def _read_raw(self, key: str) -> Optional[bytes]:
        if key in self._blobs:
            self._blobs.move_to_end(key)
            return self._blobs[key]
        if not self.data_dir:
            return None

        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            raw = path.read_bytes()
        except OSError as e:
            game_logger.logger.warning(f"Could not read local state for '{key}': {e}")
            return None
        self._cache(key, raw)
        return raw

    def _read_blob(self, key: str) -> Dict[str, Any]:
        raw = self._read_raw(key)
        if raw is None:
            return {}
        try:
            data = json.loads(raw.decode('utf-8'))
        except (UnicodeDecodeError, ValueError) as e:
            game_logger.logger.warning(f"Ignoring corrupt local state for '{key}': {e}")
            return {}
        if not isinstance(data, dict):
            game_logger.logger.warning(f"Ignoring local state for '{key}': expected an object")
            return {}
        return data

    def _write_blob(self, key: str, field: str, value: Any) -> None:
        data = self._read_blob(key)
        data[field] = value
        raw = json.dumps(data, ensure_ascii=False).encode('utf-8')
        self._cache(key, raw)
        if self.data_dir:
            try:
                self._path_for(key).write_bytes(raw)
            except OSError as e:
                game_logger.logger.warning(f"Could not write local state file for '{key}', keeping it in memory: {e}")

    def load_state(self, scope: ScopeKey) -> List[RoundSessionState]:
        documents = self._read_blob(scope.storage_key).get('state')
        try:
            return parse_round_state(documents)
        except StateValidationError as e:
            game_logger.logger.warning(f"Ignoring malformed local state for '{scope.storage_key}': {e}")
            return []

    def save_state(self, scope: ScopeKey, state: List[RoundSessionState]) -> None:
        self._write_blob(scope.storage_key, 'state', [entry.to_dict() for entry in state])

    def load_stats(self, scope: ScopeKey) -> Optional[Dict[str, Any]]:
        stats = self._read_blob(scope.stats_scope().storage_key).get('stats')
        return stats if isinstance(stats, dict) else None

    def save_stats(self, scope: ScopeKey, stats: GameStats) -> None:
        self._write_blob(scope.stats_scope().storage_key, 'stats', stats.to_dict())


class MongoStateStore:
    """Cloud persistence in the ``user_game_states`` and ``user_mode_stats`` collections."""

    def __init__(self, db):
        self.db = db
        self.states_collection = db.user_game_states
        self.stats_collection = db.user_mode_stats

        try:
            self.states_collection.create_index(
                [("user_id", 1), ("language", 1), ("mode_name", 1), ("puzzle_date", 1)], unique=True
            )
            self.stats_collection.create_index(
                [("user_id", 1), ("language", 1), ("mode_name", 1)], unique=True
            )
        except PyMongoError as e:
            game_logger.logger.warning(f"Could not create storage indexes: {e}")

    def _state_filter(self, scope: ScopeKey) -> Dict[str, Any]:
        return {
            "user_id": scope.player_id,
            "language": scope.language,
            "mode_name": scope.mode_name,
            "puzzle_date": scope.puzzle_date,
        }

    def _stats_filter(self, scope: ScopeKey) -> Dict[str, Any]:
        return {
            "user_id": scope.player_id,
            "language": scope.language,
            "mode_name": scope.mode_name,
        }

    def load_state(self, scope: ScopeKey) -> List[RoundSessionState]:
        try:
            row = self.states_collection.find_one(self._state_filter(scope))
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load state: {e}") from e

        if not row or not row.get("state"):
            return []

        try:
            return parse_round_state(row["state"])
        except StateValidationError as e:
            game_logger.logger.warning(f"Ignoring malformed cloud state for '{scope.storage_key}': {e}")
            return []

    def save_state(self, scope: ScopeKey, state: List[RoundSessionState]) -> None:
        document = {
            **self._state_filter(scope),
            "state": [entry.to_dict() for entry in state],
            "updated_at": datetime.datetime.utcnow(),
        }
        try:
            self.states_collection.replace_one(self._state_filter(scope), document, upsert=True)
        except PyMongoError as e:
            raise PersistenceError(f"Failed to save state: {e}") from e

    def load_stats(self, scope: ScopeKey) -> Optional[Dict[str, Any]]:
        try:
            row = self.stats_collection.find_one(self._stats_filter(scope))
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load stats: {e}") from e

        stats = row.get("stats") if row else None
        return stats if isinstance(stats, dict) else None

    def save_stats(self, scope: ScopeKey, stats: GameStats) -> None:
        document = {
            **self._stats_filter(scope),
            "stats": stats.to_dict(),
            "updated_at": datetime.datetime.utcnow(),
        }
        try:
            self.stats_collection.replace_one(self._stats_filter(scope), document, upsert=True)
        except PyMongoError as e:
            raise PersistenceError(f"Failed to save stats: {e}") from e


class FallbackStateStore:
    """
    Uniform persistence facade used by game sessions.

    Authenticated scopes go to the cloud store when one is configured. Any
    cloud failure is logged and the operation is served by the local store,
    so play is never blocked by storage.
    """

    def __init__(self, local: LocalStateStore, cloud: Optional[MongoStateStore] = None):
        self.local = local
        self.cloud = cloud

    def _use_cloud(self, scope: ScopeKey) -> bool:
        return self.cloud is not None and scope.authenticated

    def _degrade(self, operation: str, scope: ScopeKey, error: Exception) -> None:
        game_logger.logger.warning(
            f"Cloud {operation} failed for '{scope.storage_key}', using local storage: {error}"
        )

    def load_state(self, scope: ScopeKey) -> List[RoundSessionState]:
        if self._use_cloud(scope):
            try:
                return self.cloud.load_state(scope)
            except PersistenceError as e:
                self._degrade('state load', scope, e)
        return self.local.load_state(scope)

    def save_state(self, scope: ScopeKey, state: List[RoundSessionState]) -> None:
        if self._use_cloud(scope):
            try:
                self.cloud.save_state(scope, state)
                return
            except PersistenceError as e:
                self._degrade('state save', scope, e)
        self.local.save_state(scope, state)

    def load_stats(self, scope: ScopeKey) -> Optional[Dict[str, Any]]:
        if self._use_cloud(scope):
            try:
                return self.cloud.load_stats(scope)
            except PersistenceError as e:
                self._degrade('stats load', scope, e)
        return self.local.load_stats(scope)

    def save_stats(self, scope: ScopeKey, stats: GameStats) -> None:
        if self._use_cloud(scope):
            try:
                self.cloud.save_stats(scope, stats)
                return
            except PersistenceError as e:
                self._degrade('stats save', scope, e)
        self.local.save_stats(scope, stats)


# Global service instance
_storage_service = None


def get_storage_service() -> Optional[FallbackStateStore]:
    """Get the global storage service instance."""
    return _storage_service


def initialize_storage_service(data_dir: Optional[str] = None, db=None,
                               max_cached: int = 10000) -> FallbackStateStore:
    """Initialize the global storage service instance."""
    global _storage_service
    cloud = MongoStateStore(db) if db is not None else None
    _storage_service = FallbackStateStore(LocalStateStore(data_dir, max_cached), cloud)
    return _storage_service
