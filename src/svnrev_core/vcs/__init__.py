from .base import NO_REVISION, RevisionQuery, RevisionSummary
from .invoker import OutputBuffer, SvnversionInvoker, launch_tool
from .parser import parse_output
from .resolver import default_executable_name, resolve_executable

__all__ = [
    "NO_REVISION",
    "OutputBuffer",
    "RevisionQuery",
    "RevisionSummary",
    "SvnversionInvoker",
    "launch_tool",
    "default_executable_name",
    "parse_output",
    "resolve_executable",
]
