import os
import tempfile
import yaml
import logging
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from . import constants
from .exceptions import ConfigParsingError, ConfigValidationError, TgoIOError

logger = logging.getLogger(__name__)


class CacheRecord(BaseModel):
    """
        Class Config-Validation Model describe the persisted cache record

        Maps the workspace root and the toolchain's dependency root and build
        cache to absolute host paths, as they were when the cache was created.
    """
    pkgdir: str
    gopath: str
    gocache: str
    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("pkgdir", "gopath", "gocache")
    @classmethod
    def check_absolute(cls, value: str) -> str:
        """Every recorded path must be absolute"""
        if not os.path.isabs(value):
            raise ValueError(f"must be an absolute path, got '{value}'")
        return os.path.normpath(value)

    def as_config(self) -> Dict[str, str]:
        return {
            constants.PKG_DIR_KEY: self.pkgdir,
            constants.GO_PATH_KEY: self.gopath,
            constants.GO_CACHE_KEY: self.gocache,
        }


class ConfigStore:
    """
    Loads and persists the cache record file.

    A missing file means "cache not yet initialized" and loads as ``None``.
    Anything that is present but malformed is an error, never a default.
    """
    def __init__(self, path: str):
        self.path = path

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def load(self) -> Optional[CacheRecord]:
        raw_data = self._load_raw_config()
        if raw_data is None:
            logger.debug(f"No cache record at '{self.path}'")
            return None
        try:
            record = CacheRecord.model_validate(raw_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Cache record validation failed for '{self.path}':\n{e}")
        logger.debug(f"Loaded cache record from '{self.path}': {record.model_dump()}")
        return record

    def _load_raw_config(self) -> Optional[Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise ConfigParsingError(f"Cannot read cache record '{self.path}': {e}") from e
        try:
            config_data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file '{self.path}': {e}")
        if not isinstance(config_data, dict):
            raise ConfigParsingError(f"Cache record '{self.path}' must be a YAML document containing a dictionary.")
        return config_data

    def persist(self, record: CacheRecord):
        """Write the record through a temporary file so readers never see a partial record."""
        directory = os.path.dirname(self.path) or "."
        content = yaml.safe_dump(record.as_config(), default_flow_style=False, sort_keys=True)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".config-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise TgoIOError(f"Failed to write cache record '{self.path}': {e}", path=self.path) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        logger.info(f"Saved cache record to '{self.path}'")
