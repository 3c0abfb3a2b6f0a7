"""
Classification of incoming requests into flow phases.
"""

from collections.abc import Mapping

from oauth_bridge.core.domain import Phase


ALLOWED_METHODS = ("GET", "OPTIONS")


def classify_request(method: str, query: Mapping[str, str]) -> Phase:
    """
    Decide which phase of the flow a request belongs to.

    ``error`` is checked before ``code`` because providers may send both
    when the user cancels.
    """
    method = method.upper()
    if method not in ALLOWED_METHODS:
        return Phase.UNSUPPORTED_METHOD
    if method == "OPTIONS":
        return Phase.PREFLIGHT
    if query.get("error"):
        return Phase.CALLBACK_ERROR
    if query.get("code"):
        return Phase.CALLBACK_SUCCESS
    return Phase.INITIATE
