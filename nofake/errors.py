from dataclasses import dataclass

from fastapi.responses import JSONResponse


@dataclass(frozen=True)
class APIErrorSpec:
    code: str
    message: str
    status_code: int = 500


CONTENT_REQUIRED = APIErrorSpec(
    code="CONTENT_REQUIRED",
    message="El contenido es requerido",
    status_code=400,
)

TOPIC_REQUIRED = APIErrorSpec(
    code="TOPIC_REQUIRED",
    message="El tema es requerido",
    status_code=400,
)

UNSUPPORTED_FORMAT = APIErrorSpec(
    code="UNSUPPORTED_FORMAT",
    message="Formato debe ser 'apa7' o 'ieee'",
    status_code=400,
)

INVALID_REQUEST = APIErrorSpec(
    code="INVALID_REQUEST",
    message="Solicitud inválida",
    status_code=400,
)

INTERNAL_ERROR = APIErrorSpec(
    code="INTERNAL_ERROR",
    message="Error interno del servidor",
)

# First offending request field decides which message the client sees.
FIELD_ERRORS = {
    "content": CONTENT_REQUIRED,
    "topic": TOPIC_REQUIRED,
    "format": UNSUPPORTED_FORMAT,
}


def error_for_field(field: str | None) -> APIErrorSpec:
    if field is None:
        return INVALID_REQUEST
    return FIELD_ERRORS.get(field, INVALID_REQUEST)


def to_json_response(spec: APIErrorSpec) -> JSONResponse:
    return JSONResponse(status_code=spec.status_code, content={"error": spec.message})
