"""
Optimize Upload Lambda Function
Synchronous optimize-and-publish for a single raw upload
"""
from photo_optimizer.addressing import cdn_url
from photo_optimizer.config import config
from photo_optimizer.decorators import api_gateway_handler
from photo_optimizer.exceptions import BadRequestError, NotFoundError
from photo_optimizer.models.upload import UploadReference
from photo_optimizer.services.service_container import get_service
from photo_optimizer.utils import create_success_response, get_query_parameter


@api_gateway_handler(required_params=['photoKey'])
def lambda_handler(event, context):
    """
    Optimize the upload named by the photoKey query parameter

    Expected request:
        GET /optimize?photoKey=<upload id returned by get-signed-url>

    Returns:
        200 {'cdnURL': ..., 'photoKey': ..., 'key': ..., 'duplicate': ...}
        400 when photoKey is missing or not a bare upload id,
        404 when raw/<photoKey>.jpg is absent
    """
    photo_key = get_query_parameter(event, 'photoKey')
    try:
        reference = UploadReference.from_upload_id(photo_key)
    except ValueError as e:
        raise BadRequestError(str(e), parameter='photoKey') from e

    oracle = get_service('existence_oracle')
    if not oracle.exists(reference.key):
        raise NotFoundError(reference.key, config.bucket_name)

    result = get_service('pipeline').process_one(reference)

    url = cdn_url(result.publish_key, config.sub_domain, config.infra_domain, config.root_domain)
    return create_success_response({
        'success': True,
        'cdnURL': url,
        'photoKey': photo_key,
        'key': result.publish_key,
        'duplicate': result.duplicate
    }, event)
