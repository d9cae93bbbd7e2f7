"""Configuration management for Gist Mirror."""

from enum import Enum
from re import Pattern
from typing import Optional, Dict, Any
from pathlib import Path
import os

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
import yaml
from dotenv import load_dotenv

from ..exceptions import ConfigurationError


def _getenv(name: str) -> Optional[str]:
    """Read an environment variable, treating an empty value as unset."""
    return os.getenv(name) or None


class MirrorMode(str, Enum):
    """What happens to the source gist after its content is transferred."""

    MIRROR = 'mirror'
    CONCEAL = 'conceal'


class GitHubConfig(BaseModel):
    """Configuration for the GitHub API."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    url: str = Field(default='https://api.github.com', description='GitHub API URL')
    token: str = Field(default='', description='Personal access token')
    timeout: int = Field(default=30, description='Request timeout in seconds')
    throttle: float = Field(
        default=4000, description='Minimum delay between API calls in milliseconds'
    )
    page_size: int = Field(default=100, description='Gists requested per page')

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate GitHub API URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('throttle')
    @classmethod
    def validate_throttle(cls, v):
        """Validate throttle is not negative."""
        if v < 0:
            raise ValueError('GitHub throttle must be >= 0!')
        return v

    @field_validator('page_size')
    @classmethod
    def validate_page_size(cls, v):
        """GitHub caps per_page at 100."""
        if not 1 <= v <= 100:
            raise ValueError('Page size must be between 1 and 100')
        return v


class FilterConfig(BaseModel):
    """Patterns selecting which gists to migrate."""

    model_config = ConfigDict(frozen=True, extra='forbid', validate_default=True)

    description_match: Pattern = Field(
        default='.*', description='Regex to match gist description'
    )
    filename_match: Pattern = Field(
        default='.*', description='Regex to match gist filename'
    )


class RewriteConfig(BaseModel):
    """Rules deriving repository name and description from a gist."""

    model_config = ConfigDict(frozen=True, extra='forbid', validate_default=True)

    name_match: Pattern = Field(default='.*', description='Regex to match repo name')
    name_replace: str = Field(default=r'\g<0>', description='Replace repo name')
    description_match: Pattern = Field(
        default='.*', description='Regex to match repo description'
    )
    description_replace: str = Field(
        default=r'\g<0>', description='Replace repo description'
    )


class GitConfig(BaseModel):
    """Git operations configuration."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    temp_dir: Optional[str] = Field(
        default=None,
        description='Custom temporary directory for git operations. If not specified, uses system temp directory.',
    )
    timeout: int = Field(
        default=600, description='Git operation timeout in seconds (default: 10 minutes)'
    )

    @field_validator('temp_dir')
    @classmethod
    def validate_temp_dir(cls, v):
        """Validate temp directory path."""
        if v is not None:
            temp_path = Path(v)
            if not temp_path.is_absolute():
                raise ValueError('temp_dir must be an absolute path')
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

    model_config = ConfigDict(frozen=True, extra='forbid')

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default=None, description='Log file path')
    format: Optional[str] = Field(default=None, description='Log format')

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


class Config(BaseModel):
    """Main configuration class for Gist Mirror.

    Instances are frozen: build one at startup with ``build`` or ``load`` and
    pass it around by reference.
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    org: str = Field(default='', description='Organization to mirror to')
    mode: MirrorMode = Field(default=MirrorMode.MIRROR, description='Mirror mode')
    placeholder: str = Field(
        default='EMPTY', description='Content written over concealed files'
    )

    github: GitHubConfig = Field(
        default_factory=GitHubConfig, description='GitHub API settings'
    )
    filters: FilterConfig = Field(
        default_factory=FilterConfig, description='Gist selection'
    )
    rewrite: RewriteConfig = Field(
        default_factory=RewriteConfig, description='Repository naming rules'
    )
    git: GitConfig = Field(
        default_factory=GitConfig, description='Git operations settings'
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    @model_validator(mode='after')
    def validate_token(self):
        """A token is required for every operation."""
        if not self.github.token:
            raise ValueError('Missing GitHub token!')
        return self

    @classmethod
    def build(cls, data: Dict[str, Any], require_org: bool = True) -> 'Config':
        """Validate raw settings into a configuration.

        Args:
            data: Nested configuration dictionary
            require_org: Whether a target organization must be present

        Returns:
            Frozen configuration

        Raises:
            ConfigurationError: If the settings are missing or invalid
        """
        if require_org and not data.get('org'):
            raise ConfigurationError('Missing org to mirror to!')

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(cls._first_error(e)) from e

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        require_org: bool = True,
    ) -> 'Config':
        """Load configuration layered as file < environment < overrides.

        Args:
            config_path: Optional YAML file
            overrides: Values from command-line flags
            require_org: Whether a target organization must be present

        Returns:
            Frozen configuration
        """
        data: Dict[str, Any] = {}
        if config_path:
            data = cls._read_file(config_path)

        data = cls._merge(data, cls._env_data())
        data = cls._merge(data, cls._remove_none_values(overrides or {}))

        return cls.build(data, require_org=require_org)

    @staticmethod
    def _read_file(config_path: str) -> Dict[str, Any]:
        config_file = Path(config_path)

        if not config_file.exists():
            raise ConfigurationError(f'Configuration file not found: {config_path}')

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            detail = ' '.join(str(e).split())
            raise ConfigurationError(f'Invalid configuration file {config_path}: {detail}')

        if config_data is None:
            return {}
        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f'Configuration file must contain a mapping: {config_path}'
            )
        return config_data

    @staticmethod
    def _env_data() -> Dict[str, Any]:
        """Collect settings from environment variables (and a .env file)."""
        load_dotenv()

        throttle = _getenv('GITHUB_THROTTLE')
        try:
            throttle_value = float(throttle) if throttle else None
        except ValueError:
            raise ConfigurationError(f'Invalid GITHUB_THROTTLE: {throttle}')

        config_data = {
            'org': _getenv('GIST_MIRROR_ORG'),
            'mode': _getenv('GIST_MIRROR_MODE'),
            'github': {
                'url': _getenv('GITHUB_API_URL'),
                'token': _getenv('GITHUB_TOKEN'),
                'throttle': throttle_value,
            },
            'git': {
                'temp_dir': _getenv('GIT_TEMP_DIR'),
            },
            'logging': {
                'level': _getenv('LOG_LEVEL'),
                'file': _getenv('LOG_FILE'),
            },
        }

        return Config._remove_none_values(config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values and empty sections from dictionary."""
        if isinstance(data, dict):
            cleaned = {}
            for k, v in data.items():
                if v is None:
                    continue
                v = Config._remove_none_values(v)
                if isinstance(v, dict) and not v:
                    continue
                cleaned[k] = v
            return cleaned
        return data

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-merge two nested dictionaries, ``override`` wins."""
        merged = dict(base)
        for k, v in override.items():
            if isinstance(v, dict) and isinstance(merged.get(k), dict):
                merged[k] = Config._merge(merged[k], v)
            else:
                merged[k] = v
        return merged

    @staticmethod
    def _first_error(error: ValidationError) -> str:
        """Reduce a pydantic error to a single readable line."""
        first = error.errors()[0]
        ctx_error = (first.get('ctx') or {}).get('error')
        message = str(ctx_error) if ctx_error else first.get('msg', str(error))
        message = ' '.join(message.split())
        location = '.'.join(str(part) for part in first.get('loc', ()))
        return f'{location}: {message}' if location else message

    @staticmethod
    def create_template(output_path: str) -> None:
        """Create a configuration template file."""
        template_config = {
            'org': 'your-organization',
            'mode': 'mirror',
            'placeholder': 'EMPTY',
            'github': {
                'url': 'https://api.github.com',
                'token': 'your-github-personal-access-token',
                'timeout': 30,
                'throttle': 4000,
                'page_size': 100,
            },
            'filters': {
                'description_match': '.*',
                'filename_match': '.*',
            },
            'rewrite': {
                'name_match': '.*',
                'name_replace': r'\g<0>',
                'description_match': '.*',
                'description_replace': r'\g<0>',
            },
            'git': {
                'temp_dir': '/tmp/gist-mirror',
                'timeout': 600,
            },
            'logging': {
                'level': 'INFO',
                'file': 'gist-mirror.log',
            },
        }

        config_file = Path(output_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                template_config, f, default_flow_style=False, indent=2, sort_keys=False
            )
