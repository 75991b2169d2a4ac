"""
Configuration management for the Spotify remote.
Settings come from environment variables (.env) and are validated at startup.
"""
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple
from dotenv import load_dotenv

# Get the directory of this config file
_current_dir = os.path.dirname(os.path.abspath(__file__))
_project_root = os.path.dirname(_current_dir)

# Load environment variables from .env (package directory first, then project root)
_env_path = os.path.join(_current_dir, '.env')
if not os.path.exists(_env_path):
    _env_path = os.path.join(_project_root, '.env')
load_dotenv(_env_path)

DEFAULT_SCOPE = 'user-read-playback-state user-modify-playback-state'
DEFAULT_REQUEST_TIMEOUT = 10.0

# Logging settings are read before any Config instance exists
LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FORMAT: str = os.getenv('LOG_FORMAT', 'detailed').lower()


class ConfigError(ValueError):
    """Raised when the configuration is missing or invalid"""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"Invalid configuration: {len(self.errors)} error(s) found: " + '; '.join(self.errors))


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Config:
    """Explicit configuration passed into the API helper and the redirect server"""

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    port: Optional[int] = None
    refresh_token: Optional[str] = None
    market: Optional[str] = None
    device_id: Optional[str] = None
    scope: str = DEFAULT_SCOPE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT
    log_file: Optional[str] = None
    # Raw values from_env could not parse, reported by validate()
    parse_errors: Tuple[str, ...] = field(default=(), repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        """
        Build a Config from environment variables.

        Values that cannot be parsed are recorded with their raw text so
        validate() can report them together with the missing ones.
        """
        env = os.environ if environ is None else environ

        parse_errors = []

        port_raw = _optional(env.get('PORT'))
        try:
            port = int(port_raw) if port_raw is not None else None
        except ValueError:
            port = None
            parse_errors.append(f"PORT must be an integer, got '{port_raw}'")

        timeout_raw = _optional(env.get('REQUEST_TIMEOUT'))
        try:
            timeout = float(timeout_raw) if timeout_raw is not None else DEFAULT_REQUEST_TIMEOUT
        except ValueError:
            timeout = DEFAULT_REQUEST_TIMEOUT
            parse_errors.append(f"REQUEST_TIMEOUT must be a positive number, got '{timeout_raw}'")

        return cls(
            client_id=_optional(env.get('CLIENT_ID')),
            client_secret=_optional(env.get('CLIENT_SECRET')),
            redirect_uri=_optional(env.get('REDIRECT_URI')),
            port=port,
            refresh_token=_optional(env.get('REFRESH_TOKEN')),
            market=_optional(env.get('MARKET')),
            device_id=_optional(env.get('DEVICE_ID')),
            scope=_optional(env.get('SCOPE')) or DEFAULT_SCOPE,
            request_timeout=timeout,
            log_level=(_optional(env.get('LOG_LEVEL')) or 'INFO').upper(),
            log_format=(_optional(env.get('LOG_FORMAT')) or 'detailed').lower(),
            log_file=_optional(env.get('LOG_FILE')),
            parse_errors=tuple(parse_errors),
        )

    @property
    def resolved_redirect_uri(self) -> Optional[str]:
        """Redirect URI with the {PORT} placeholder substituted"""
        if self.redirect_uri is None:
            return None
        return self.redirect_uri.replace('{PORT}', str(self.port))

    def validate(self) -> 'Config':
        """Validate configuration, log warnings and raise ConfigError on errors"""
        # Imported here: the logger module reads LOG_LEVEL from this module
        from .lib.utils.logger import server_logger

        errors = list(self.parse_errors)
        warnings = []

        if not self.client_id:
            errors.append("CLIENT_ID is required")
        if not self.client_secret:
            errors.append("CLIENT_SECRET is required")
        if not self.redirect_uri:
            errors.append("REDIRECT_URI is required")

        if self.port is None:
            if not any(e.startswith('PORT ') for e in self.parse_errors):
                errors.append("PORT is required")
        elif not (1 <= self.port <= 65535):
            errors.append(f"PORT must be between 1-65535, got {self.port}")

        if self.request_timeout <= 0:
            errors.append(f"REQUEST_TIMEOUT must be a positive number, got {self.request_timeout}")

        if self.log_format not in ('simple', 'detailed'):
            warnings.append(f"LOG_FORMAT '{self.log_format}' is unknown (using 'detailed')")

        if not self.refresh_token:
            warnings.append("REFRESH_TOKEN is not set; open /auth to obtain one")

        for warning in warnings:
            server_logger.warning(f"⚠️  Configuration Warning: {warning}")

        if errors:
            server_logger.error("❌ Configuration Errors:")
            for error in errors:
                server_logger.error(f"   • {error}")
            raise ConfigError(errors)

        return self

    def log_config(self) -> None:
        """Log current configuration (secrets masked)"""
        from .lib.utils.logger import server_logger

        server_logger.info("📋 Configuration:")
        server_logger.info(f"   CLIENT_ID: {_mask(self.client_id)}")
        server_logger.info(f"   REDIRECT_URI: {self.resolved_redirect_uri}")
        server_logger.info(f"   PORT: {self.port}")
        server_logger.info(f"   REFRESH_TOKEN: {'set' if self.refresh_token else 'not set'}")
        server_logger.info(f"   MARKET: {self.market or '(provider default)'}")
        server_logger.info(f"   DEVICE_ID: {self.device_id or '(active device)'}")
        server_logger.info(f"   LOG_LEVEL: {self.log_level}")


def _mask(value: Optional[str]) -> str:
    if not value:
        return '(not set)'
    if len(value) <= 8:
        return '***'
    return value[:4] + '...' + value[-4:]
