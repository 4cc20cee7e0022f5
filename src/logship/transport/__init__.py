from .uploader import API_KEY_HEADER_NAME, BULK_UPLOAD_RESOURCE, BatchUploader, UploadResult, build_envelope

__all__ = [
    "API_KEY_HEADER_NAME",
    "BULK_UPLOAD_RESOURCE",
    "BatchUploader",
    "UploadResult",
    "build_envelope",
]
