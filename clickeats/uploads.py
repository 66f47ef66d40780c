import logging
import uuid

from django.conf import settings
from django.core.files.storage import default_storage
from rest_framework import serializers

logger = logging.getLogger(__name__)

EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
    'image/gif': 'gif',
}


def validate_image_upload(file):
    """
    Reject files of the wrong type or over the size limit before any storage call.

    Run after a serializers.ImageField, which opens the file with Pillow and
    replaces the client-declared content_type with the detected one.
    """
    content_type = getattr(file, 'content_type', None)
    if content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise serializers.ValidationError(
            'Please upload a valid image file (JPEG, PNG, WebP, or GIF)'
        )

    max_size = settings.MAX_IMAGE_UPLOAD_BYTES
    if file.size > max_size:
        raise serializers.ValidationError(
            f'Image size must be less than {max_size // (1024 * 1024)}MB'
        )
    return file


def store_image(file, folder, request=None):
    """
    Save a validated image through the default storage and return its public URL.

    Storage backends that serve from MEDIA_URL give a path; with a request the
    path is made absolute so it can be saved on a URLField.
    """
    validate_image_upload(file)

    extension = EXTENSIONS[file.content_type]

    name = default_storage.save(f'{folder}/{uuid.uuid4().hex}.{extension}', file)
    url = default_storage.url(name)
    if request is not None:
        url = request.build_absolute_uri(url)
    logger.info("Stored image %s (%s bytes) at %s", file.name, file.size, url)
    return url


class ImageUploadSerializer(serializers.Serializer):
    FOLDER_CHOICES = [
        ('menu-items', 'Menu item photo'),
        ('merchants', 'Merchant logo or cover'),
        ('promotions', 'Promotion banner'),
        ('payment-methods', 'Payment QR code'),
    ]

    image = serializers.ImageField()
    folder = serializers.ChoiceField(choices=FOLDER_CHOICES, default='menu-items')

    def validate_image(self, value):
        return validate_image_upload(value)
