from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from mcp_registry.domain.registry_utils import render_json


class RegistryJSONResponse(JSONResponse):
    """
    JSONResponse that renders with the same serializer as the static export.
    """

    def render(self, content: Any) -> bytes:
        return render_json(content)


def error_payload(error: str, message: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": error}
    if message is not None:
        payload["message"] = message
    return payload
