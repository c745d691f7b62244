"""Detect which API description format a loaded document uses."""


def detect_format(document: object) -> str:
    """Detect the format of a parsed API description document.

    Returns: 'swagger' (Swagger 2.0), 'openapi' (OpenAPI 3.x) or 'unknown'.
    """
    if not isinstance(document, dict):
        return "unknown"
    if str(document.get("swagger", "")).startswith("2"):
        return "swagger"
    if "openapi" in document:
        return "openapi"
    return "unknown"
