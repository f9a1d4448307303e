__all__ = ["ExtraFormatter", "LogStyle", "TRACE"]

from .extra import ExtraFormatter
from .style import LogStyle

# below DEBUG; prompts and raw grader responses are logged at this level
TRACE = 5
