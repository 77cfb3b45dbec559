"""
Photo Optimizer Constants
"""


class HTTPConstants:
    """HTTP status codes and headers"""

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    TOO_MANY_REQUESTS = 429
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503

    CONTENT_TYPE = 'Content-Type'
    JSON = 'application/json'


class KeyConstants:
    """Object key namespace"""

    RAW_PREFIX = 'raw/'
    PHOTO_PREFIX = 'photo/'
    JPEG_SUFFIX = '.jpg'
    JPEG_SUFFIXES = ('.jpg', '.jpeg')
    JPEG_CONTENT_TYPE = 'image/jpeg'


class StoreConstants:
    """Object store error codes"""

    # HEAD on a missing key answers 403 when the role lacks s3:ListBucket
    ABSENT_ERROR_CODES = ('403', 'Forbidden', 'AccessDenied')


class OptimizerConstants:
    """jpegoptim invocation"""

    DEFAULT_QUALITY = 80
    OVERWRITE_FLAG = '-o'
    STRIP_ALL_FLAG = '-s'
    MAX_QUALITY_FLAG = '-m'

    # Archive layout is jpegoptim/bin/jpegoptim
    ARCHIVE_STRIP_COMPONENTS = 1


class HashConstants:
    MD5 = 'md5'
    SHA256 = 'sha256'

    SUPPORTED = (MD5, SHA256)
    CHUNK_SIZE = 1024 * 1024
