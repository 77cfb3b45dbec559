"""
Lambda event and response utilities
"""
import json
from datetime import datetime, timezone
from typing import Dict, Any, Optional, List, Tuple
from urllib.parse import unquote_plus

from .constants import HTTPConstants


def create_response(status_code: int, body: str, event: Optional[dict] = None, headers: Optional[dict] = None) -> Dict[str, Any]:
    """
    Create standardized Lambda proxy response

    Args:
        status_code: HTTP status code
        body: Response body (JSON string)
        event: Original Lambda event for context
        headers: Additional headers

    Returns:
        Lambda proxy integration response
    """
    default_headers = {
        HTTPConstants.CONTENT_TYPE: HTTPConstants.JSON,
        'Access-Control-Allow-Origin': '*',
        'Access-Control-Allow-Headers': 'Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token',
        'Access-Control-Allow-Methods': 'GET,OPTIONS'
    }

    if headers:
        default_headers.update(headers)

    return {
        'statusCode': status_code,
        'headers': default_headers,
        'body': body
    }


def create_success_response(data: Dict[str, Any], event: Optional[dict] = None) -> Dict[str, Any]:
    return create_response(HTTPConstants.OK, json.dumps(data), event)


def create_error_response(status_code: int, message: str, event: Optional[dict] = None, details: Optional[dict] = None) -> Dict[str, Any]:
    """
    Create standardized error response

    Args:
        status_code: HTTP status code
        message: Error message
        event: Original Lambda event for context
        details: Additional error details

    Returns:
        Lambda proxy integration error response
    """
    error_body = {
        'success': False,
        'error': message,
        'timestamp': datetime.now(timezone.utc).isoformat()
    }

    if details:
        error_body.update(details)

    return create_response(status_code, json.dumps(error_body), event)


def get_query_parameter(event: dict, name: str) -> Optional[str]:
    """Query string parameter from an HTTP API event, None if absent or blank"""
    params = event.get('queryStringParameters') or {}
    value = params.get(name)
    if value is None or not str(value).strip():
        return None
    return str(value).strip()


def extract_s3_records(event: dict) -> List[Tuple[str, str]]:
    """
    (bucket, key) pairs from an S3 notification

    Object keys arrive URL-encoded with '+' for spaces.
    """
    records = []
    for record in event.get('Records') or []:
        s3 = record.get('s3') or {}
        bucket = (s3.get('bucket') or {}).get('name')
        key = (s3.get('object') or {}).get('key')
        if not bucket or not key:
            continue
        records.append((bucket, unquote_plus(key)))
    return records
