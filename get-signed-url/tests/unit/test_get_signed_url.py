"""
Unit tests for the get-signed-url Lambda function
"""
import importlib.util
import json
import os
from unittest.mock import MagicMock

from photo_optimizer.exceptions import StoreAccessError
from photo_optimizer.services.service_container import register_service
from photo_optimizer.services.upload_service import UploadService


APP_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), 'app.py'
)
_module_spec = importlib.util.spec_from_file_location('get_signed_url_app', APP_PATH)
app = importlib.util.module_from_spec(_module_spec)
_module_spec.loader.exec_module(app)


class TestGetSignedUrlHandler:

    def test_returns_photo_key_and_upload_url(self, object_store, http_api_event, lambda_context):
        register_service('upload_service', UploadService(object_store, 300))

        response = app.lambda_handler(http_api_event, lambda_context)

        assert response['statusCode'] == 200
        body = json.loads(response['body'])
        assert body['photoKey']
        assert f"raw/{body['photoKey']}.jpg" in body['uploadURL']

    def test_each_call_issues_a_new_key(self, object_store, http_api_event, lambda_context):
        register_service('upload_service', UploadService(object_store, 300))

        first = json.loads(app.lambda_handler(http_api_event, lambda_context)['body'])
        second = json.loads(app.lambda_handler(http_api_event, lambda_context)['body'])

        assert first['photoKey'] != second['photoKey']

    def test_signing_failure(self, http_api_event, lambda_context):
        store = MagicMock()
        store.presigned_put_url.side_effect = StoreAccessError('cannot sign', operation='presign')
        register_service('upload_service', UploadService(store, 300))

        response = app.lambda_handler(http_api_event, lambda_context)

        assert response['statusCode'] == 500
