"""
Optimize Batch Lambda Function
Processes raw uploads announced by S3 ObjectCreated notifications
"""
from photo_optimizer.config import config
from photo_optimizer.decorators import s3_event_handler
from photo_optimizer.logger import pipeline_logger as logger
from photo_optimizer.models.upload import UploadReference
from photo_optimizer.services.service_container import get_service
from photo_optimizer.utils import extract_s3_records


def collect_references(event: dict, bucket_name: str) -> list:
    """Raw upload references from the event, skipping foreign buckets and keys"""
    references = []
    for bucket, key in extract_s3_records(event):
        if bucket != bucket_name:
            logger.warning("Skipping record from unexpected bucket", bucket=bucket, key=key)
            continue
        try:
            references.append(UploadReference.from_key(key))
        except ValueError:
            logger.warning("Skipping key outside raw/ namespace", bucket=bucket, key=key)
    return references


@s3_event_handler()
def lambda_handler(event, context):
    """
    Optimize every raw upload in the notification, then invalidate once

    Any failure propagates so the event is redelivered.
    """
    references = collect_references(event, config.bucket_name)
    token = getattr(context, 'aws_request_id', None)

    batch = get_service('batch_pipeline').process_batch(references, request_token=token)
    return batch.to_dict()
