from .controller import Analytics, UploadFormController, UploadState

__all__ = [
    "Analytics",
    "UploadFormController",
    "UploadState",
]
