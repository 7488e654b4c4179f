"""Configuration management for Gitea Migration Tool."""

from typing import Optional, Dict, Any, Literal
from pathlib import Path
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator
import yaml
from dotenv import load_dotenv


GITHUB_API_URL = 'https://api.github.com'


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


def _validate_http_url(v: str) -> str:
    if not v.startswith(('http://', 'https://')):
        raise ValueError('URL must start with http:// or https://')
    return v.rstrip('/')


class SourceConfig(BaseModel):
    """Configuration for the service repositories are copied from."""

    kind: Literal['github', 'gitea'] = Field(
        default='github', description='Source service type'
    )
    url: str = Field(
        default=GITHUB_API_URL,
        description='API base URL for GitHub, instance URL for Gitea',
    )
    user: str = Field(..., description='Account whose repositories are migrated')
    token: Optional[str] = Field(default=None, description='Access token')
    timeout: int = Field(default=30, description='Request timeout in seconds')
    rate_limit_per_second: float = Field(
        default=10.0, description='API requests per second limit'
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate source URL format."""
        return _validate_http_url(v)

    @field_validator('user')
    @classmethod
    def validate_user(cls, v):
        """Validate the account name is present."""
        if not v or not v.strip():
            raise ValueError('Source user must not be empty')
        return v.strip()

    @field_validator('rate_limit_per_second')
    @classmethod
    def validate_rate_limit(cls, v):
        """Validate rate limit is positive."""
        if v <= 0:
            raise ValueError('Rate limit must be positive')
        return v


class DestinationConfig(BaseModel):
    """Configuration for the Gitea instance repositories are copied to."""

    url: str = Field(..., description='Gitea instance URL')
    user: str = Field(..., description='Gitea username owning the new repositories')
    token: str = Field(..., description='Gitea API token')
    timeout: int = Field(default=30, description='Request timeout in seconds')
    rate_limit_per_second: float = Field(
        default=10.0, description='API requests per second limit'
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate Gitea URL format."""
        return _validate_http_url(v)

    @field_validator('token')
    @classmethod
    def validate_token(cls, v):
        """Validate that a token is provided."""
        if not v:
            raise ValueError('Gitea token must be provided')
        return v

    @field_validator('rate_limit_per_second')
    @classmethod
    def validate_rate_limit(cls, v):
        """Validate rate limit is positive."""
        if v <= 0:
            raise ValueError('Rate limit must be positive')
        return v


class MigrationConfig(BaseModel):
    """Migration-specific configuration."""

    include_forks: bool = Field(default=False, description='Migrate forks as well')
    max_attempts: int = Field(
        default=2, description='Attempts per repository before giving up'
    )
    retry_delay: float = Field(
        default=2.0, description='Seconds to wait between attempts'
    )
    dry_run: bool = Field(default=False, description='Perform dry run without changes')

    @field_validator('max_attempts')
    @classmethod
    def validate_max_attempts(cls, v):
        """Validate at least one attempt is made."""
        if v < 1:
            raise ValueError('max_attempts must be at least 1')
        return v

    @field_validator('retry_delay')
    @classmethod
    def validate_retry_delay(cls, v):
        """Validate retry delay is not negative."""
        if v < 0:
            raise ValueError('retry_delay must not be negative')
        return v


class GitConfig(BaseModel):
    """Git operations configuration."""

    temp_dir: Optional[str] = Field(
        default=None,
        description='Custom temporary directory for git operations. If not specified, uses system temp directory.',
    )
    timeout: int = Field(
        default=3600, description='Git operation timeout in seconds (default: 1 hour)'
    )

    @field_validator('temp_dir')
    @classmethod
    def validate_temp_dir(cls, v):
        """Validate temp directory path."""
        if v is not None:
            temp_path = Path(v)
            if not temp_path.is_absolute():
                raise ValueError('temp_dir must be an absolute path')
            # Create directory if it doesn't exist
            temp_path.mkdir(parents=True, exist_ok=True)
            if not temp_path.is_dir():
                raise ValueError(f'temp_dir path is not a directory: {v}')
        return v

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Git timeout must be positive')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default=None, description='Log file path')
    format: Optional[str] = Field(default=None, description='Console log format')

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


class Config(BaseModel):
    """Main configuration class for Gitea Migration Tool."""

    model_config = ConfigDict(extra='forbid')

    source: SourceConfig = Field(..., description='Source service')
    destination: DestinationConfig = Field(..., description='Destination Gitea instance')
    migration: MigrationConfig = Field(
        default_factory=MigrationConfig, description='Migration settings'
    )
    git: GitConfig = Field(
        default_factory=GitConfig, description='Git operations settings'
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file."""
        return cls(**cls._read_file(config_path))

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        return cls(**cls._env_data())

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> 'Config':
        """Load configuration from a YAML file, or the environment without one.

        Args:
            config_path: YAML file to read
            overrides: Per-section values replacing the loaded ones; None
                values are ignored

        Returns:
            Validated configuration
        """
        if config_path:
            config_data = cls._read_file(config_path)
        else:
            config_data = cls._env_data()

        for section, values in (overrides or {}).items():
            section_data = config_data.setdefault(section, {})
            section_data.update(cls._remove_none_values(values))

        return cls(**config_data)

    @staticmethod
    def _read_file(config_path: str) -> Dict[str, Any]:
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if not isinstance(config_data, dict):
            raise ValueError(f'Configuration file is not a mapping: {config_path}')

        return config_data

    @classmethod
    def _env_data(cls) -> Dict[str, Any]:
        # Load .env file if it exists
        load_dotenv()

        config_data = {
            'source': {
                'kind': os.getenv('SOURCE_KIND'),
                'url': os.getenv('SOURCE_URL'),
                'user': os.getenv('GITHUB_USER'),
                'token': os.getenv('GITHUB_TOKEN'),
            },
            'destination': {
                'url': os.getenv('GITEA_URL'),
                'user': os.getenv('GITEA_USERNAME'),
                'token': os.getenv('GITEA_TOKEN'),
            },
            'migration': {
                'include_forks': _env_flag('MIGRATE_FORKS'),
                'max_attempts': int(os.getenv('MIGRATION_RETRIES', 2)),
                'retry_delay': float(os.getenv('MIGRATION_RETRY_DELAY', 2.0)),
                'dry_run': _env_flag('MIGRATION_DRY_RUN'),
            },
            'git': {
                'temp_dir': os.getenv('GIT_TEMP_DIR'),
                'timeout': int(os.getenv('GIT_TIMEOUT', 3600)),
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', 'INFO'),
                'file': os.getenv('LOG_FILE'),
            },
        }

        # Remove None values
        return cls._remove_none_values(config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None
            }
        return data

    def to_file(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.safe_dump(
                self.model_dump(),
                f,
                default_flow_style=False,
                indent=2,
                sort_keys=False,
            )

    @staticmethod
    def create_template(output_path: str) -> None:
        """Create a configuration template file."""
        template_config = {
            'source': {
                'kind': 'github',
                'url': GITHUB_API_URL,
                'user': 'your-github-username',
                'token': 'optional-github-token',
                'timeout': 30,
            },
            'destination': {
                'url': 'https://gitea.example.com',
                'user': 'your-gitea-username',
                'token': 'your-gitea-api-token',
                'timeout': 30,
            },
            'migration': {
                'include_forks': False,
                'max_attempts': 2,
                'retry_delay': 2.0,
                'dry_run': False,
            },
            'git': {
                'temp_dir': '/tmp/gitea-migration',
                'timeout': 3600,
            },
            'logging': {
                'level': 'INFO',
                'file': 'migration.log',
            },
        }

        config_file = Path(output_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.safe_dump(
                template_config, f, default_flow_style=False, indent=2, sort_keys=False
            )
