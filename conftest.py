"""
Pytest configuration and fixtures for the photo optimizer tests
Provides AWS mocking, a fake jpegoptim toolchain and common test data
"""
import io
import os
import tarfile
import pytest
import boto3
from botocore.exceptions import ClientError
from moto import mock_aws
from unittest.mock import MagicMock
from urllib.parse import quote_plus
from PIL import Image


# Set test environment variables
os.environ.update({
    'AWS_DEFAULT_REGION': 'us-east-1',
    'AWS_ACCESS_KEY_ID': 'testing',
    'AWS_SECRET_ACCESS_KEY': 'testing',
    'AWS_SECURITY_TOKEN': 'testing',
    'AWS_SESSION_TOKEN': 'testing',
    'ENVIRONMENT': 'test',
    'PARAMETER_STORE_ENABLED': 'false',
    'BUCKET_NAME': 'photo-optimizer-test',
    'DISTRIBUTION_ID': 'E2TESTDISTRIBUTION',
    'ROOT_DOMAIN': 'example.com',
    'INFRA_DOMAIN': 'cdn',
    'SUB_DOMAIN': 'photos',
    'PHOTO_OPTIMIZER_ENABLE_DEBUG_LOGGING': 'false'
})

from photo_optimizer.processors.optimizer import OptimizerToolchain  # noqa: E402
from photo_optimizer.services.object_store import ObjectStore  # noqa: E402
from photo_optimizer.services.existence_oracle import ExistenceOracle  # noqa: E402
from photo_optimizer.services.pipeline import PipelineOrchestrator  # noqa: E402
from photo_optimizer.services.service_container import clear_services  # noqa: E402


BUCKET_NAME = os.environ['BUCKET_NAME']

# Stand-in for jpegoptim: rewrites the last argument with fixed, smaller bytes
FAKE_OPTIMIZER = """#!/bin/sh
for target; do :; done
printf 'optimized-jpeg' > "$target"
"""

FAILING_OPTIMIZER = """#!/bin/sh
echo "jpegoptim: corrupt JPEG data" >&2
exit 2
"""


class NoListPermissionS3:
    """
    S3 client as seen by a role without s3:ListBucket

    HEAD on a missing key answers 403 instead of 404; every other call is
    passed through to the wrapped (moto) client.
    """

    def __init__(self, client):
        self._client = client

    def head_object(self, **kwargs):
        try:
            return self._client.head_object(**kwargs)
        except ClientError as e:
            if e.response['Error']['Code'] in ('404', 'NoSuchKey'):
                raise ClientError(
                    {'Error': {'Code': '403', 'Message': 'Forbidden'},
                     'ResponseMetadata': {'HTTPStatusCode': 403}},
                    'HeadObject'
                ) from e
            raise

    def __getattr__(self, name):
        return getattr(self._client, name)


@pytest.fixture(autouse=True)
def reset_service_container():
    """Each test starts from a cold worker"""
    clear_services()
    yield
    clear_services()


@pytest.fixture
def aws_credentials():
    """Mocked AWS Credentials for moto"""
    os.environ.update({
        'AWS_ACCESS_KEY_ID': 'testing',
        'AWS_SECRET_ACCESS_KEY': 'testing',
        'AWS_SECURITY_TOKEN': 'testing',
        'AWS_SESSION_TOKEN': 'testing'
    })


@pytest.fixture
def s3_client(aws_credentials):
    """moto S3 client with the photo bucket created"""
    with mock_aws():
        client = boto3.client('s3', region_name='us-east-1')
        client.create_bucket(Bucket=BUCKET_NAME)
        yield client


@pytest.fixture
def object_store(s3_client):
    return ObjectStore(BUCKET_NAME, s3_client=NoListPermissionS3(s3_client))


@pytest.fixture
def oracle(object_store):
    return ExistenceOracle(object_store)


def build_toolchain_archive(path, script: str = FAKE_OPTIMIZER, binary_name: str = 'jpegoptim') -> str:
    """Write a jpegoptim.tar.gz laid out as jpegoptim/bin/<binary_name>"""
    data = script.encode('utf-8')
    with tarfile.open(path, 'w:gz') as archive:
        for dirname in ('jpegoptim', 'jpegoptim/bin'):
            info = tarfile.TarInfo(dirname)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            archive.addfile(info)
        info = tarfile.TarInfo(f'jpegoptim/bin/{binary_name}')
        info.size = len(data)
        info.mode = 0o755
        archive.addfile(info, io.BytesIO(data))
    return str(path)


@pytest.fixture
def toolchain_archive(tmp_path):
    return build_toolchain_archive(tmp_path / 'jpegoptim.tar.gz')


@pytest.fixture
def failing_toolchain_archive(tmp_path):
    return build_toolchain_archive(tmp_path / 'jpegoptim-broken.tar.gz', FAILING_OPTIMIZER)


@pytest.fixture
def toolchain(toolchain_archive, tmp_path):
    return OptimizerToolchain(toolchain_archive, install_root=str(tmp_path / 'runtime'))


@pytest.fixture
def failing_toolchain(failing_toolchain_archive, tmp_path):
    return OptimizerToolchain(failing_toolchain_archive, install_root=str(tmp_path / 'runtime-broken'))


@pytest.fixture
def work_dir(tmp_path):
    path = tmp_path / 'work'
    path.mkdir()
    return str(path)


@pytest.fixture
def mock_invalidator():
    invalidator = MagicMock()
    invalidator.invalidate.return_value = 'I2J0I21PCUYOIK'
    return invalidator


@pytest.fixture
def pipeline(object_store, oracle, toolchain, work_dir, mock_invalidator):
    return PipelineOrchestrator(
        store=object_store,
        oracle=oracle,
        toolchain=toolchain,
        invalidator=mock_invalidator,
        work_dir=work_dir
    )


def make_jpeg(color='red', size=(64, 64)) -> bytes:
    img = Image.new('RGB', size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG', quality=95)
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes():
    return make_jpeg('red')


@pytest.fixture
def other_jpeg_bytes():
    return make_jpeg('blue')


@pytest.fixture
def third_jpeg_bytes():
    return make_jpeg('green')


@pytest.fixture
def lambda_context():
    """Mock Lambda context"""
    context = MagicMock()
    context.function_name = 'test-function'
    context.function_version = '$LATEST'
    context.invoked_function_arn = 'arn:aws:lambda:us-east-1:123456789012:function:test-function'
    context.memory_limit_in_mb = 1024
    context.get_remaining_time_in_millis.return_value = 900000
    context.aws_request_id = 'test-request-id'
    return context


@pytest.fixture
def http_api_event():
    """HTTP API (payload v2) event without query parameters"""
    return {
        'version': '2.0',
        'routeKey': 'GET /optimize',
        'rawPath': '/optimize',
        'rawQueryString': '',
        'headers': {'content-type': 'application/json'},
        'requestContext': {
            'accountId': '123456789012',
            'apiId': 'test-api',
            'http': {'method': 'GET', 'path': '/optimize', 'sourceIp': '127.0.0.1'},
            'requestId': 'test-request-id',
            'stage': '$default'
        },
        'isBase64Encoded': False
    }


def make_s3_event(keys, bucket=BUCKET_NAME) -> dict:
    """S3 ObjectCreated notification for the given (unencoded) keys"""
    return {
        'Records': [
            {
                'eventVersion': '2.1',
                'eventSource': 'aws:s3',
                'awsRegion': 'us-east-1',
                'eventName': 'ObjectCreated:Put',
                's3': {
                    's3SchemaVersion': '1.0',
                    'bucket': {'name': bucket, 'arn': f'arn:aws:s3:::{bucket}'},
                    'object': {'key': quote_plus(key, safe='/'), 'size': 1024}
                }
            }
            for key in keys
        ]
    }


@pytest.fixture
def s3_event_factory():
    return make_s3_event


@pytest.fixture
def jpeg_factory():
    return make_jpeg


@pytest.fixture
def toolchain_archive_factory():
    return build_toolchain_archive
