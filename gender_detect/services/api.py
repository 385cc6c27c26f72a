from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, File, Request, UploadFile
from fastapi.responses import Response

from gender_detect.services.models import (
    AcquireResponse, ClassifyResponse, HealthResponse, ImageOut, StatusResponse,
)
from gender_detect.services.settings import Settings, load_settings
from gender_detect.services.status_store import StatusStore
from gender_detect.orchestrator import errors
from gender_detect.orchestrator.classifier import ClassificationClient
from gender_detect.orchestrator.contracts import GenderResult
from gender_detect.orchestrator.state_machine import AcquisitionController
from gender_detect.adapters.vision.factory import build_vision

router = APIRouter()


def _build_camera(settings: Settings, status: StatusStore):
    # Camera adapter: CAMERA_ADAPTER = cv2 | mock (default: cv2)
    if settings.camera_adapter == "mock":
        from gender_detect.adapters.camera.mock_camera import MockCamera
        return MockCamera(status)
    from gender_detect.adapters.camera.cv2_camera import CV2Camera
    return CV2Camera(status, index=settings.camera_index, jpeg_quality=settings.jpeg_quality)


def create_app(settings: Settings | None = None, camera=None, vision=None,
               status: StatusStore | None = None) -> FastAPI:
    settings = settings or load_settings()
    status = status or StatusStore()
    camera = camera or _build_camera(settings, status)
    vision = vision or build_vision(settings, status)
    classifier = ClassificationClient(vision, status, api_key=settings.api_key)
    controller = AcquisitionController(camera, status)

    status.log(f"vision adapter: {type(vision).__name__}")
    status.log(f"camera adapter: {type(camera).__name__}")
    if not classifier.configured:
        status.log("config fault: no API key for the vision adapter, classification will return Error")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        controller.close()
        await vision.aclose()

    app = FastAPI(title="gender-detect api", lifespan=lifespan)
    app.state.settings = settings
    app.state.status = status
    app.state.camera = camera
    app.state.vision = vision
    app.state.classifier = classifier
    app.state.controller = controller
    app.include_router(router)
    return app


def _image_out(controller: AcquisitionController) -> ImageOut | None:
    snap = controller.snapshot()["image"]
    return ImageOut(**snap) if snap else None


def _acquired(controller: AcquisitionController) -> AcquireResponse:
    return AcquireResponse(ok=True, state=controller.state, image=_image_out(controller))


def _acquire_failed(controller: AcquisitionController, code: str, message: str) -> AcquireResponse:
    return AcquireResponse(ok=False, state=controller.state, image=_image_out(controller),
                           error_code=code, error=message)


@router.get("/status", response_model=StatusResponse)
async def get_status(request: Request):
    snap = request.app.state.controller.snapshot()
    return StatusResponse(
        state=snap["state"],
        busy=snap["busy"],
        result=snap["result"],
        error=snap["error"],
        image=ImageOut(**snap["image"]) if snap["image"] else None,
        camera_open=snap["camera_open"],
        logs=request.app.state.status.logs,
    )


@router.post("/select_file", response_model=AcquireResponse)
async def select_file(request: Request, file: UploadFile = File(...)):
    controller = request.app.state.controller
    try:
        image = await controller.select_file(file)
    except errors.AcquisitionError as e:
        return _acquire_failed(controller, e.code, e.message)
    finally:
        await file.close()
    if image is None:
        return _acquire_failed(controller, errors.ERR_SUPERSEDED, "Selection was cancelled by a reset.")
    return _acquired(controller)


@router.post("/camera/open", response_model=AcquireResponse)
async def camera_open(request: Request):
    controller = request.app.state.controller
    try:
        live = await controller.open_camera()
    except errors.CameraUnavailable as e:
        return _acquire_failed(controller, e.code, e.message)
    if not live:
        return _acquire_failed(controller, errors.ERR_SUPERSEDED, "Camera start was cancelled by a reset.")
    return _acquired(controller)


@router.post("/camera/capture", response_model=AcquireResponse)
async def camera_capture(request: Request):
    controller = request.app.state.controller
    try:
        image = await controller.capture_frame()
    except errors.CameraUnavailable as e:
        return _acquire_failed(controller, e.code, e.message)
    if image is None:
        return _acquire_failed(controller, errors.ERR_NOT_CAMERA_LIVE, "Camera is not running.")
    return _acquired(controller)


@router.get("/camera/frame")
async def camera_frame(request: Request):
    """Live view while the camera is open; 404 otherwise."""
    frame = await request.app.state.controller.preview_frame()
    if frame is None:
        return Response(status_code=404)
    return Response(content=frame, media_type="image/jpeg", headers={"Cache-Control": "no-store"})


@router.post("/classify", response_model=ClassifyResponse)
async def classify(request: Request):
    controller = request.app.state.controller
    classifier = request.app.state.classifier
    try:
        result = await controller.classify(classifier)
    except (errors.ClassificationBusy, errors.NoImageSelected) as e:
        return ClassifyResponse(ok=False, state=controller.state, error_code=e.code, error=e.message)

    if result is None:
        return ClassifyResponse(ok=False, state=controller.state, error_code=errors.ERR_SUPERSEDED,
                                error="Classification was cancelled by a reset.")
    if result == GenderResult.ERROR:
        code = errors.ERR_CLASSIFICATION_FAILURE if classifier.configured else errors.ERR_MISSING_CREDENTIAL
        return ClassifyResponse(ok=False, result=result, state=controller.state,
                                error_code=code, error=controller.error)
    return ClassifyResponse(ok=True, result=result, state=controller.state)


@router.post("/reset", response_model=AcquireResponse)
async def reset(request: Request):
    controller = request.app.state.controller
    controller.reset()
    request.app.state.status.log("RESET")
    return _acquired(controller)


@router.get("/image")
async def current_image(request: Request):
    """Preview of the current image, with its declared mime type."""
    image = request.app.state.controller.image
    if image is None:
        return Response(status_code=404)
    return Response(content=image.raw_bytes(), media_type=image.mime_type)


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    state = request.app.state
    return HealthResponse(
        vision_adapter=type(state.vision).__name__,
        credential_configured=state.classifier.configured,
        camera_adapter=type(state.camera).__name__,
        camera_open=state.camera.is_open,
    )
