"""
Shared endpoint dependencies
"""

from datetime import datetime
from typing import Callable

from overlap.core.utils import utcnow


def get_clock() -> Callable[[], datetime]:
    """Wall clock used for phase deadlines; overridden in tests"""
    return utcnow
