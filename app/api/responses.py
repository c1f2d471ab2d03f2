"""Map upload outcomes to proxy responses."""

from robyn import status_codes

from app.core.errors import ClientInputError, UploadError
from app.models.core import ProxyResponse, UploadResponse, UploadResult

JSON_HEADERS = {"Content-Type": "application/json"}


def build_response(outcome: UploadResult | BaseException) -> ProxyResponse:
    """Build the response for a finished request.

    Client input errors give 400, every other failure 500. Error responses have an empty body.
    """
    match outcome:
        case UploadResult(id=upload_id):
            return ProxyResponse(
                statusCode=status_codes.HTTP_201_CREATED,
                headers=dict(JSON_HEADERS),
                body=UploadResponse(uuid=upload_id).model_dump_json(),
            )
        case ClientInputError():
            return ProxyResponse(statusCode=status_codes.HTTP_400_BAD_REQUEST)
        case UploadError(status_code=status_code):
            return ProxyResponse(statusCode=status_code)
        case _:
            return ProxyResponse(statusCode=status_codes.HTTP_500_INTERNAL_SERVER_ERROR)
