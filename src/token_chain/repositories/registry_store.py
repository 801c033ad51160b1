"""JSON file storage for the user theme registry."""

from pathlib import Path

from pydantic import ValidationError

from token_chain.domain.registry import ChangeAction, ChangelogEntry, UserRegistry
from token_chain.exceptions import RegistryLoadError
from token_chain.logging_config import get_logger
from token_chain.repositories.interfaces import RegistryRepository
from token_chain.schemas import ChangelogRecord, RegistryMeta, RegistrySnapshot

logger = get_logger(__name__)


class JsonRegistryStore(RegistryRepository):
    """Registry snapshot kept in a single JSON document.

    The store only reads; the snapshot text it serializes is written by the
    artifact writer together with the rendered theme files.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> UserRegistry:
        """Load the registry, or an empty one when the file does not exist.

        Raises:
            RegistryLoadError: If the file exists but cannot be read or does
                not hold a valid snapshot.
        """
        if not self.path.exists():
            logger.debug("registry_missing", path=str(self.path))
            return UserRegistry()

        try:
            text = self.path.read_text(encoding="utf-8")
            snapshot = RegistrySnapshot.model_validate_json(text)
        except (OSError, UnicodeDecodeError) as e:
            raise RegistryLoadError(self.path, str(e)) from e
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "(root)"
            raise RegistryLoadError(self.path, f"{location}: {first['msg']}") from e

        registry = self._snapshot_to_registry(snapshot)
        logger.debug(
            "registry_loaded",
            path=str(self.path),
            overrides=registry.override_count,
            changelog=len(registry.changelog),
        )
        return registry

    def serialize(self, registry: UserRegistry, meta: RegistryMeta) -> str:
        snapshot = RegistrySnapshot(
            meta=meta,
            tokens=dict(registry.tokens),
            removed=list(registry.removed),
            changelog=[self._entry_to_record(entry) for entry in registry.changelog],
        )
        return snapshot.model_dump_json(indent=2) + "\n"

    def _snapshot_to_registry(self, snapshot: RegistrySnapshot) -> UserRegistry:
        return UserRegistry(
            tokens=dict(snapshot.tokens),
            removed=list(snapshot.removed),
            changelog=[self._record_to_entry(record) for record in snapshot.changelog],
        )

    def _record_to_entry(self, record: ChangelogRecord) -> ChangelogEntry:
        return ChangelogEntry(
            action=ChangeAction(record.action),
            token=record.token,
            value=record.value,
            previous=record.previous,
            recorded_at=record.recorded_at,
        )

    def _entry_to_record(self, entry: ChangelogEntry) -> ChangelogRecord:
        return ChangelogRecord(
            action=entry.action.value,
            token=entry.token,
            value=entry.value,
            previous=entry.previous,
            recorded_at=entry.recorded_at,
        )


__all__ = ["JsonRegistryStore"]
