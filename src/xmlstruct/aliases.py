from xmlstruct.core.models import NamespaceMode
from xmlstruct.utils.log_utils import LOG_LEVELS

NAMESPACE_MODE_ALIASES = {
    "local": NamespaceMode.LOCAL,
    "prefixed": NamespaceMode.PREFIXED,
}

NAMESPACE_MODE_CHOICES = list(NAMESPACE_MODE_ALIASES.keys())

NAMESPACE_MODE_HELP_TEXT = (
    "How namespace-qualified names are compared:\n"
    "  local     : " + NamespaceMode.LOCAL.description + "\n"
    "  prefixed  : " + NamespaceMode.PREFIXED.description + "\n"
    "Default: taken from the config file (local)"
)

LOG_LEVEL_CHOICES = [level for level in LOG_LEVELS if level != "warning"]

EPILOG_TEXT = """
Examples:
  Group every .xml/.tei file under a corpus by structure
  %(prog)s ~/corpus/tei

  Use 8 threads, only look two directory levels deep, compact JSON
  %(prog)s ~/corpus/tei -t 8 -d 2 --no-pretty -o structures.json

  Keep namespace prefixes distinct and only scan .xml files
  %(prog)s ~/corpus/tei -x xml --namespace-mode prefixed

  Quiet run for scripts (only errors on stderr)
  %(prog)s ~/corpus/tei -q --no-progress -o /tmp/report.json
"""
