"""
Arbitration output.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict

from opencode_notifier.models.session import DEFAULT_TITLE


class Classification(str, Enum):
    """Decision category. Values double as configuration keys."""
    PERMISSION = "permission"
    COMPLETION = "complete"
    DELEGATED_COMPLETION = "subagent"
    ERROR = "error"


class NotificationDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    classification: Classification
    session_title: str = DEFAULT_TITLE
