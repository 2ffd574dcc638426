"""
Configuration Management

Settings for the Gerrit connection, robot comment identity, review
filtering and logging.
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
import logging


RUN_ID_ENV = "GERRIT_REVIEWER_RUN_ID"
RUN_URL_ENV = "GERRIT_REVIEWER_RUN_URL"
DEFAULT_ROBOT_ID = "gerrit-reviewer"


@dataclass
class GerritConfig:
    """Gerrit API settings"""
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_seconds: float = 30


@dataclass
class RobotConfig:
    """Robot comment identity. run_id and run_url are opaque to the reviewer."""
    robot_id: str = DEFAULT_ROBOT_ID
    run_id: str = ""
    run_url: str = ""

    @classmethod
    def from_env(cls, robot_id: str = DEFAULT_ROBOT_ID) -> "RobotConfig":
        """Read run metadata from the environment; unset variables give ''"""
        return cls(
            robot_id=robot_id,
            run_id=os.getenv(RUN_ID_ENV, ""),
            run_url=os.getenv(RUN_URL_ENV, ""),
        )


@dataclass
class ReviewConfig:
    """Review filtering settings"""
    min_severity: Optional[str] = None
    max_workers: int = 4
    submit_timeout_seconds: Optional[float] = None


@dataclass
class LoggingConfig:
    """Logging settings"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """Application settings"""
    gerrit: GerritConfig = field(default_factory=GerritConfig)
    robot: RobotConfig = field(default_factory=RobotConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load settings from environment variables"""
        timeout = os.getenv("GERRIT_SUBMIT_TIMEOUT")
        return cls(
            gerrit=GerritConfig(
                url=os.getenv("GERRIT_URL"),
                username=os.getenv("GERRIT_USERNAME"),
                password=os.getenv("GERRIT_PASSWORD"),
                timeout_seconds=float(os.getenv("GERRIT_TIMEOUT", "30")),
            ),
            robot=RobotConfig.from_env(os.getenv("GERRIT_ROBOT_ID", DEFAULT_ROBOT_ID)),
            review=ReviewConfig(
                min_severity=os.getenv("MIN_SEVERITY"),
                max_workers=int(os.getenv("MAX_WORKERS", "4")),
                submit_timeout_seconds=float(timeout) if timeout else None,
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """Load settings from a YAML file. Run metadata always comes from the environment."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        robot_data = config_data.get('robot', {})
        return cls(
            gerrit=GerritConfig(**config_data.get('gerrit', {})),
            robot=RobotConfig.from_env(robot_data.get('robot_id', DEFAULT_ROBOT_ID)),
            review=ReviewConfig(**config_data.get('review', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """Validate settings"""
        errors = []

        if not self.gerrit.url:
            errors.append("Gerrit URL is required")

        if bool(self.gerrit.username) != bool(self.gerrit.password):
            errors.append("Gerrit username and password must be set together")

        if not self.robot.robot_id.strip():
            errors.append("Robot ID cannot be empty")

        valid_severities = {'INFO', 'WARNING', 'ERROR'}
        if self.review.min_severity and self.review.min_severity.upper() not in valid_severities:
            errors.append(f"Invalid minimum severity: {self.review.min_severity}")

        if self.review.max_workers <= 0:
            errors.append("Worker count must be positive")

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """Settings as a dict"""
        return {
            'gerrit': {
                'url': self.gerrit.url,
                'username': self.gerrit.username,
                'timeout_seconds': self.gerrit.timeout_seconds,
                # password is never exported
            },
            'robot': {
                'robot_id': self.robot.robot_id,
                'run_id': self.robot.run_id,
                'run_url': self.robot.run_url,
            },
            'review': {
                'min_severity': self.review.min_severity,
                'max_workers': self.review.max_workers,
                'submit_timeout_seconds': self.review.submit_timeout_seconds,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


class ConfigManager:
    """Holds the validated configuration and applies logging settings"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        return self._config

    def _setup_logging(self) -> None:
        level = logging.DEBUG if self._config.debug else getattr(logging, self._config.logging.level.upper())
        logging.basicConfig(level=level, format=self._config.logging.format)

        if self._config.logging.file_path:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))
            logging.getLogger().addHandler(handler)


_config_manager: Optional[ConfigManager] = None


def get_config() -> AppConfig:
    """Current configuration, loaded from the environment on first use"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config
