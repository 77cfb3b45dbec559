"""
Get Signed URL Lambda Function
Issues an upload id and a short-lived write URL for raw/<id>.jpg
"""
from photo_optimizer.decorators import api_gateway_handler
from photo_optimizer.services.service_container import get_service
from photo_optimizer.utils import create_success_response


@api_gateway_handler()
def lambda_handler(event, context):
    handle = get_service('upload_service').issue_write_handle()
    return create_success_response(handle, event)
