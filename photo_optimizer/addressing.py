"""
Content addressing for published photos
"""
import hashlib
from .constants import KeyConstants, HashConstants


def _new_hash(algorithm: str):
    if algorithm not in HashConstants.SUPPORTED:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return hashlib.new(algorithm)


def fingerprint(data: bytes, algorithm: str = HashConstants.MD5) -> str:
    """
    Calculate the content fingerprint of raw image bytes

    MD5 guards against accidental collisions only. Pass 'sha256' where
    uploads may be adversarial.

    Args:
        data: Raw bytes, not validated as an image
        algorithm: Hash algorithm ('md5', 'sha256')

    Returns:
        Hex digest
    """
    digest = _new_hash(algorithm)
    digest.update(data)
    return digest.hexdigest()


def fingerprint_file(path: str, algorithm: str = HashConstants.MD5) -> str:
    """Same digest as fingerprint(), streamed from a file on disk"""
    digest = _new_hash(algorithm)
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(HashConstants.CHUNK_SIZE), b''):
            digest.update(chunk)
    return digest.hexdigest()


def publish_key(digest: str) -> str:
    return f"{KeyConstants.PHOTO_PREFIX}{digest}{KeyConstants.JPEG_SUFFIX}"


def raw_key(upload_id: str) -> str:
    return f"{KeyConstants.RAW_PREFIX}{upload_id}{KeyConstants.JPEG_SUFFIX}"


def cdn_url(key: str, sub_domain: str, infra_domain: str, root_domain: str) -> str:
    """
    Public CDN URL for a published key

    Returns:
        https://<sub>.<infra>.<root>/<key>
    """
    return f"https://{sub_domain}.{infra_domain}.{root_domain}/{key}"


def invalidation_path(key: str) -> str:
    # CloudFront paths are absolute
    return key if key.startswith('/') else f"/{key}"
