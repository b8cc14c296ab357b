# target_determinator/handlers/__init__.py

import logging

# Common logger for all handlers
logger = logging.getLogger("target-determinator")

from .affected import handle_affected
from .drive import handle_drive

__all__ = [
    'handle_affected',
    'handle_drive',
]
