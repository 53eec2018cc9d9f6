import re
from typing import List

# {0} positional placeholder; {{ and }} are literal braces
NUMERAL_RE = re.compile(r"\{\{|\}\}|\{0\}", re.UNICODE)

# any positional placeholder, e.g. {0} or {1}
POSITIONAL_RE = re.compile(r"(?<!\{)\{(\d+)\}(?!\})", re.UNICODE)


def extract_positional(text: str) -> List[str]:
    return POSITIONAL_RE.findall(text or "")


def has_numeral(text: str) -> bool:
    return "0" in extract_positional(text)


def substitute_numeral(template: str, n: int) -> str:
    """
    Fill the {0} placeholder with the decimal form of n and collapse escaped
    {{ / }} to single braces. Other {...} tokens are left as written; this
    never raises.
    """
    if not template or ("{" not in template and "}" not in template):
        return template or ""
    value = str(n)

    def _repl(m: "re.Match[str]") -> str:
        token = m.group(0)
        if token == "{0}":
            return value
        return token[0]

    return NUMERAL_RE.sub(_repl, template)
