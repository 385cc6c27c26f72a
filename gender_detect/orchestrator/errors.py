ERR_BUSY = "BUSY"
ERR_NO_IMAGE = "NO_IMAGE"
ERR_NOT_CAMERA_LIVE = "NOT_CAMERA_LIVE"
ERR_MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
ERR_CLASSIFICATION_FAILURE = "CLASSIFICATION_FAILURE"
ERR_SUPERSEDED = "SUPERSEDED"

CLASSIFY_FAILED_MESSAGE = "Could not classify the image. Please try again."


class AcquisitionError(Exception):
    """Base for failures while getting an image into the controller.

    ``code`` is stable for API clients, ``message`` is shown to the user.
    """

    code = "ACQUISITION_ERROR"
    message = "Could not acquire an image."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidFileType(AcquisitionError):
    code = "INVALID_FILE_TYPE"
    message = "Invalid file type. Please upload an image (JPEG, PNG, WEBP, GIF, HEIC, HEIF)."


class FileTooLarge(AcquisitionError):
    code = "FILE_TOO_LARGE"
    message = "Image too large. Maximum size is 4MB."


class FileReadFailure(AcquisitionError):
    code = "FILE_READ_FAILURE"
    message = "Failed to read file."


class CameraUnavailable(AcquisitionError):
    code = "CAMERA_UNAVAILABLE"
    message = "Could not access camera. Please ensure permissions are granted."


class NoImageSelected(Exception):
    code = ERR_NO_IMAGE
    message = "Please select an image first."

    def __init__(self):
        super().__init__(self.message)


class ClassificationBusy(Exception):
    code = ERR_BUSY
    message = "A classification is already in progress."

    def __init__(self):
        super().__init__(self.message)
