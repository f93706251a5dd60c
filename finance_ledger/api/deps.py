"""
Shared FastAPI dependencies.
"""

from datetime import datetime
from typing import Callable


def get_clock() -> Callable[[], datetime]:
    """
    Source of "now" for every request.

    Tests override this dependency to pin the date.
    """
    return datetime.now
