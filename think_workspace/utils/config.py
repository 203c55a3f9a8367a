"""
Configuration management for session storage and application settings.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class StorageConfig:
    """Configuration for the on-disk session records."""
    session_dir: str
    default_session_file: str


@dataclass
class ChainConfig:
    """Configuration for reasoning-chain reconstruction."""
    max_hops: int
    visible_length: int
    preview_length: int
    related_limit: int


@dataclass
class SearchConfig:
    """Configuration for lexical thought search."""
    default_limit: int
    max_limit: int


@dataclass
class RetentionConfig:
    """Configuration for session retention."""
    default_max_age_days: int


@dataclass
class MCPConfig:
    """Configuration for MCP interface."""
    transport: str
    host: str
    port: int


@dataclass
class AppConfig:
    """Main application configuration."""
    environment: str
    log_level: str
    storage: StorageConfig
    chain: ChainConfig
    search: SearchConfig
    retention: RetentionConfig
    mcp: MCPConfig
    log_file: Optional[str] = None


def load_config() -> AppConfig:
    """Load configuration from environment variables with defaults."""
    environment = os.getenv('ENVIRONMENT', 'development')

    # Session storage configuration
    default_dir = os.path.join(os.path.expanduser('~'), '.think-workspace', 'sessions')
    storage_config = StorageConfig(session_dir=os.getenv('THINK_SESSION_DIR', default_dir),
                                   default_session_file=os.getenv('THINK_DEFAULT_SESSION_FILE', '.default_session.json'))

    # Reasoning chain configuration
    chain_config = ChainConfig(max_hops=int(os.getenv('THINK_CHAIN_MAX_HOPS', '20')),
                               visible_length=int(os.getenv('THINK_CHAIN_VISIBLE_LENGTH', '7')),
                               preview_length=int(os.getenv('THINK_PREVIEW_LENGTH', '120')),
                               related_limit=int(os.getenv('THINK_RELATED_LIMIT', '3')))

    # Search configuration
    search_config = SearchConfig(default_limit=int(os.getenv('THINK_SEARCH_DEFAULT_LIMIT', '10')),
                                 max_limit=int(os.getenv('THINK_SEARCH_MAX_LIMIT', '20')))

    # Retention configuration
    retention_config = RetentionConfig(default_max_age_days=int(os.getenv('THINK_RETENTION_MAX_AGE_DAYS', '90')))

    # MCP configuration
    mcp_config = MCPConfig(transport=os.getenv('MCP_TRANSPORT', 'stdio'),
                           host=os.getenv('MCP_HOST', '127.0.0.1'),
                           port=int(os.getenv('MCP_PORT', '8000')))

    return AppConfig(environment=environment,
                     log_level=os.getenv('LOG_LEVEL', 'INFO'),
                     storage=storage_config,
                     chain=chain_config,
                     search=search_config,
                     retention=retention_config,
                     mcp=mcp_config,
                     log_file=os.getenv('LOG_FILE') or None)


# Global configuration instance
config = load_config()
