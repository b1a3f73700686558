"""
Object storage utility functions

S3-compatible storage (Cloudflare R2 in production) for uploaded images:
- client management
- object key generation
- uploads returning the object's public URL
"""

import os
import uuid
import boto3
from botocore.client import Config
from flask import current_app
from log_config import get_app_logger

logger = get_app_logger()


def get_storage_client():
    """
    Create and return a configured S3-compatible client
    """
    try:
        aws_access_key_id = current_app.config.get('AWS_ACCESS_KEY_ID')
        aws_secret_access_key = current_app.config.get('AWS_SECRET_ACCESS_KEY')
        endpoint_url = current_app.config.get('STORAGE_ENDPOINT_URL')

        if not aws_access_key_id or not aws_secret_access_key:
            raise ValueError("Storage credentials not found in configuration")

        config = Config(
            signature_version='s3v4',
            retries={'max_attempts': 3},
            s3={
                'addressing_style': 'virtual'
            }
        )

        return boto3.client(
            's3',
            endpoint_url=endpoint_url,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name='auto',  # R2 uses 'auto' region
            config=config
        )
    except Exception as e:
        logger.error(f"Failed to create storage client: {str(e)}")
        raise


def generate_object_key(prefix, filename):
    """
    Build a collision-free object key under a prefix, keeping the file extension

    Example: gallery/12/3f0c...9a.jpg
    """
    _, ext = os.path.splitext(filename or '')
    return f"{prefix.strip('/')}/{uuid.uuid4().hex}{ext.lower()}"


def public_url(bucket, object_key):
    base = (current_app.config.get('STORAGE_PUBLIC_BASE_URL') or '').rstrip('/')
    return f"{base}/{bucket}/{object_key}"


def upload_bytes(bucket, object_key, data, content_type, client=None):
    """Upload one object and return its public URL"""
    client = client or get_storage_client()
    client.put_object(
        Bucket=bucket,
        Key=object_key,
        Body=data,
        ContentType=content_type
    )
    logger.info(f"Uploaded {object_key} to {bucket} ({len(data)} bytes)")
    return public_url(bucket, object_key)
