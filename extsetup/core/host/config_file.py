"""Loading and saving of the host configuration document (YAML or JSON)"""

import json
import logging
import os
import tempfile
from pathlib import Path

import yaml
from pydantic import ValidationError

from extsetup.core.host.models import HostConfiguration
from extsetup.core.setup.exceptions import HostError

logger = logging.getLogger(__name__)


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in (".yaml", ".yml")


class HostConfigFile:
    """Host configuration document on disk"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> HostConfiguration:
        """
        Load the configuration

        Returns:
            HostConfiguration (empty when the file does not exist)

        Raises:
            HostError: If the file cannot be read or is malformed
        """
        if not self.path.exists():
            logger.debug(f"Host configuration not found, using empty configuration: {self.path}")
            return HostConfiguration()

        try:
            text = self.path.read_text(encoding="utf-8")
            if _is_yaml(self.path):
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text) if text.strip() else {}
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise HostError(f"Failed to read host configuration {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise HostError(
                f"Host configuration must be a mapping, got {type(data).__name__}: {self.path}"
            )

        try:
            return HostConfiguration(**data)
        except ValidationError as e:
            raise HostError(f"Invalid host configuration {self.path}: {e}") from e

    def save(self, config: HostConfiguration) -> None:
        """
        Save the configuration atomically

        Raises:
            HostError: If the file cannot be written
        """
        data = config.model_dump(mode="json")
        if _is_yaml(self.path):
            text = yaml.safe_dump(data, sort_keys=False)
        else:
            text = json.dumps(data, indent=2) + "\n"

        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise HostError(f"Failed to write host configuration {self.path}: {e}") from e
