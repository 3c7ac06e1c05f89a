"""Migration steps and the sources their scripts are read from."""

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Protocol

from .errors import ScriptNotFoundError

MIGRATIONS_DIR = Path(__file__).parent


@dataclass(frozen=True)
class MigrationStep:
    """A schema change that brings the database to ``version``."""

    version: int
    name: str
    resource: str


# Applied in ascending version order. A new version needs a new entry here
# and a matching script under sql/.
MIGRATION_STEPS: tuple[MigrationStep, ...] = (
    MigrationStep(version=0, name="init", resource="sql/init.sql"),
    MigrationStep(version=1, name="v1", resource="sql/v1.sql"),
)


class ScriptSource(Protocol):
    """Read-by-name access to migration scripts."""

    def read(self, name: str) -> str:
        ...


class FileScriptSource:
    """Reads scripts from files relative to a root directory.

    Defaults to the scripts bundled with this package.
    """

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root else MIGRATIONS_DIR

    def read(self, name: str) -> str:
        path = self.root / name
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ScriptNotFoundError(f"Migration script not found: {path}") from e


class MappingScriptSource:
    """Serves scripts from an in-memory ``name -> text`` mapping."""

    def __init__(self, scripts: Mapping[str, str]) -> None:
        self._scripts = dict(scripts)

    def read(self, name: str) -> str:
        if name not in self._scripts:
            raise ScriptNotFoundError(f"Migration script not found: {name}")
        return self._scripts[name]
