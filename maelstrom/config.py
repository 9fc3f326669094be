"""
Configuration management.

Related classes:
  - server.dependencies: builds repositories and the insight generator from this config
  - offline_queue.cli: resolves the API URL and queue path from this config
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@dataclass
class OllamaConfig:
    """Ollama API settings"""

    host: str = "http://localhost:11434"
    model: str = "llama3.1:8b"


@dataclass
class StorageConfig:
    """Local database locations"""

    db_path: str = "data/maelstrom.db"
    offline_queue_path: str = "data/offline_queue.db"


@dataclass
class ConnectivityConfig:
    """Reachability probe settings"""

    probe_path: str = "/api/health"
    timeout_seconds: float = 3.0


@dataclass
class InsightConfig:
    """Undercurrent generation limits"""

    min_notes: int = 3
    max_notes: int = 20


@dataclass
class Config:
    """Application configuration"""

    ollama: OllamaConfig = None  # type: ignore
    storage: StorageConfig = None  # type: ignore
    connectivity: ConnectivityConfig = None  # type: ignore
    insight: InsightConfig = None  # type: ignore

    # logging
    log_level: str = "INFO"
    log_file: str = "logs/maelstrom.log"

    # HTTP API
    api_base_url: str = "http://localhost:8000"

    # generation
    max_tokens: int = 4096
    temperature: float = 0.7

    def __post_init__(self):
        """Fill in nested defaults"""
        if self.ollama is None:
            self.ollama = OllamaConfig()
        if self.storage is None:
            self.storage = StorageConfig()
        if self.connectivity is None:
            self.connectivity = ConnectivityConfig()
        if self.insight is None:
            self.insight = InsightConfig()

    @property
    def probe_url(self) -> str:
        return self.api_base_url.rstrip("/") + self.connectivity.probe_path

    @staticmethod
    def resolve_storage_path(configured: str, env_name: str) -> Path:
        """Environment override first, then the configured path (relative to the project root)."""
        env_value = os.getenv(env_name)
        if env_value:
            return Path(env_value)
        return PROJECT_ROOT / configured

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """Load settings from a YAML file.

        Args:
            config_path: path to the YAML file (defaults to config/app_config.yaml)

        Returns:
            Config: the loaded configuration
        """
        if config_path is None:
            config_path = PROJECT_ROOT / "config" / "app_config.yaml"

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        ollama_data = yaml_data.get("ollama", {})
        ai_data = yaml_data.get("ai", {})
        log_data = yaml_data.get("log", {})
        storage_data = yaml_data.get("storage", {})
        api_data = yaml_data.get("api", {})
        connectivity_data = yaml_data.get("connectivity", {})
        insight_data = yaml_data.get("insight", {})

        return cls(
            ollama=OllamaConfig(
                host=ollama_data.get("host", "http://localhost:11434"),
                model=ollama_data.get("model", "llama3.1:8b"),
            ),
            storage=StorageConfig(
                db_path=storage_data.get("db_path", "data/maelstrom.db"),
                offline_queue_path=storage_data.get(
                    "offline_queue_path", "data/offline_queue.db"
                ),
            ),
            connectivity=ConnectivityConfig(
                probe_path=connectivity_data.get("probe_path", "/api/health"),
                timeout_seconds=float(connectivity_data.get("timeout_seconds", 3.0)),
            ),
            insight=InsightConfig(
                min_notes=insight_data.get("min_notes", 3),
                max_notes=insight_data.get("max_notes", 20),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/maelstrom.log"),
            api_base_url=api_data.get("base_url", "http://localhost:8000"),
            max_tokens=ai_data.get("max_tokens", 4096),
            temperature=ai_data.get("temperature", 0.7),
        )

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """YAML settings when the file exists, environment variables otherwise"""
        try:
            return cls.from_yaml(config_path)
        except FileNotFoundError:
            return cls.from_env()

    @classmethod
    def from_env(cls) -> "Config":
        """Load settings from environment variables"""
        return cls(
            ollama=OllamaConfig(
                host=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
                model=os.getenv("OLLAMA_MODEL", "llama3.1:8b"),
            ),
            storage=StorageConfig(
                db_path=os.getenv("MAELSTROM_DB_PATH", "data/maelstrom.db"),
                offline_queue_path=os.getenv(
                    "MAELSTROM_OFFLINE_DB_PATH", "data/offline_queue.db"
                ),
            ),
            connectivity=ConnectivityConfig(
                probe_path=os.getenv("MAELSTROM_PROBE_PATH", "/api/health"),
                timeout_seconds=float(os.getenv("MAELSTROM_PROBE_TIMEOUT", "3.0")),
            ),
            insight=InsightConfig(
                min_notes=int(os.getenv("INSIGHT_MIN_NOTES", "3")),
                max_notes=int(os.getenv("INSIGHT_MAX_NOTES", "20")),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/maelstrom.log"),
            api_base_url=os.getenv("MAELSTROM_API_URL", "http://localhost:8000"),
            max_tokens=int(os.getenv("MAX_TOKENS", "4096")),
            temperature=float(os.getenv("TEMPERATURE", "0.7")),
        )
