"""
Health check utilities for the application.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from .config import AppConfig, config
from .logging_config import get_logger

logger = get_logger(__name__)

SERVICE_NAME = 'Think Workspace'
SERVICE_VERSION = '1.0.0'


def check_health(app_config: Optional[AppConfig] = None) -> bool:
    """Check the health of all system components.

    Returns:
        True if all components are healthy, False otherwise
    """
    try:
        health_status = get_health_status(app_config)

        # Check if all components are healthy
        all_healthy = all(status.get('healthy', False) for status in health_status.values())

        if all_healthy:
            logger.info('All system components are healthy')
        else:
            logger.warning('Some system components are unhealthy')

        return all_healthy

    except Exception as e:
        logger.error(f'Health check failed: {e}')
        return False


def get_health_status(app_config: Optional[AppConfig] = None) -> Dict[str, Any]:
    """Get detailed health status of all components.

    Returns:
        Dictionary with health status of each component
    """
    app_config = app_config or config
    health_status = {}

    # Check session storage
    session_dir = Path(app_config.storage.session_dir)
    try:
        session_dir.mkdir(parents=True, exist_ok=True)
        writable = os.access(session_dir, os.W_OK)
        sessions = [p for p in session_dir.glob('*.json') if p.name != app_config.storage.default_session_file]
        health_status['session_storage'] = {
            'healthy': writable,
            'service': 'Session storage',
            'path': str(session_dir),
            'session_count': len(sessions)
        }
    except OSError as e:
        health_status['session_storage'] = {
            'healthy': False,
            'service': 'Session storage',
            'path': str(session_dir),
            'error': str(e)
        }

    return health_status


def get_system_info(app_config: Optional[AppConfig] = None) -> Dict[str, Any]:
    """Get system information and configuration.

    Returns:
        Dictionary with system information
    """
    app_config = app_config or config
    return {
        'service_name': SERVICE_NAME,
        'version': SERVICE_VERSION,
        'configuration': {
            'environment': app_config.environment,
            'session_dir': app_config.storage.session_dir,
            'retention_days': app_config.retention.default_max_age_days,
            'mcp_transport': app_config.mcp.transport
        },
        'health_status': get_health_status(app_config)
    }
