"""
FastAPI server for PetCheck.

Users are identified only by an opaque cookie; each request works on that
user's slice of the injected key-value store.
"""

import re
from typing import Optional
from uuid import UUID, uuid4

from petcheck.config import Settings, StorageBackend, get_settings
from petcheck.core.logging import LogContext, get_logger
from petcheck.core.models import ReferenceChart
from petcheck.dipstick.generator import ResultGenerator
from petcheck.llm.client import CompletionClient
from petcheck.storage.store import KeyValueStore

logger = get_logger(__name__)

_USER_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    completion_client: Optional[CompletionClient] = None,
    result_generator: Optional[ResultGenerator] = None,
    chart: Optional[ReferenceChart] = None,
):
    """
    Create the FastAPI application.

    Args:
        settings: Application settings. Uses global settings if not provided.
        store: Key-value store for pets, records and rate limits.
        completion_client: Chat capability. Created from settings when an API
            key is configured; chat answers 503 otherwise.
        result_generator: Generator for simulated analysis.
        chart: Reference chart for scans.
    """
    try:
        from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, Response, UploadFile
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
        from pydantic import BaseModel, Field, ValidationError, field_validator
    except ImportError:
        raise ImportError("FastAPI is required. Install with: pip install petcheck[api]")

    from petcheck.core.exceptions import (
        CompletionError,
        DuplicatePetError,
        ImageDecodeError,
        RateLimitExceededError,
        ScanError,
    )
    from petcheck.core.models import HealthRecord, Pet, SampleConfig
    from petcheck.core.types import Gender, RecordSource
    from petcheck.dipstick import (
        DipstickReader,
        RandomResultGenerator,
        chart_to_dict,
        generate_readings,
        health_score,
    )
    from petcheck.llm import PetHealthAssistant, create_client
    from petcheck.storage import PetRepository, RateLimiter, RecordRepository, create_store

    settings = settings or get_settings()
    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Pet health records and urine dipstick scanning",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # State
    store = store if store is not None else create_store(settings)
    reader = DipstickReader(chart=chart, settings=settings.scan)
    generator = result_generator or RandomResultGenerator(
        abnormal_probability=settings.simulation.abnormal_probability,
        seed=settings.simulation.seed,
    )
    if completion_client is None:
        try:
            completion_client = create_client(settings.llm)
        except ValueError as e:
            logger.warning(f"Chat disabled: {e}")
    assistant = None
    if completion_client is not None:
        limiter = RateLimiter(
            store,
            limit=settings.api.chat_rate_limit,
            window_seconds=settings.api.chat_rate_window_seconds,
            scope="chat",
        )
        assistant = PetHealthAssistant(completion_client, rate_limiter=limiter)

    max_upload_bytes = settings.api.max_upload_size_mb * 1024 * 1024
    penalty = settings.simulation.penalty_per_level

    # Pydantic models
    class PetCreate(BaseModel):
        name: str = Field(..., min_length=1, max_length=64)
        breed: str = ""
        age: int = Field(default=0, ge=0, le=50)
        gender: Gender = Gender.MALE
        weight: float = Field(default=0.0, ge=0.0, le=200.0)

        @field_validator("name", "breed", mode="before")
        @classmethod
        def strip_text(cls, v):
            return v.strip() if isinstance(v, str) else v

    class PetUpdate(BaseModel):
        name: Optional[str] = Field(default=None, min_length=1, max_length=64)
        breed: Optional[str] = None
        age: Optional[int] = Field(default=None, ge=0, le=50)
        gender: Optional[Gender] = None
        weight: Optional[float] = Field(default=None, ge=0.0, le=200.0)

        @field_validator("name", "breed", mode="before")
        @classmethod
        def strip_text(cls, v):
            return v.strip() if isinstance(v, str) else v

    class AnalyzeRequest(BaseModel):
        pet_id: Optional[UUID] = None

    class ChatRequest(BaseModel):
        message: str = Field(..., min_length=1, max_length=4000)

    # Identity
    def current_user(request: Request, response: Response) -> str:
        user_id = request.cookies.get(settings.api.cookie_name)
        if not user_id or not _USER_ID_PATTERN.match(user_id):
            user_id = uuid4().hex
            response.set_cookie(
                settings.api.cookie_name,
                user_id,
                max_age=settings.api.cookie_max_age_days * 86400,
                httponly=True,
                samesite="lax",
            )
        return user_id

    def pet_repository(user_id: str = Depends(current_user)) -> PetRepository:
        return PetRepository(store, user_id)

    def record_repository(user_id: str = Depends(current_user)) -> RecordRepository:
        return RecordRepository(store, user_id)

    def require_pet(pets: PetRepository, pet_id: Optional[UUID]) -> None:
        if pet_id is not None and pets.get(pet_id) is None:
            raise HTTPException(status_code=404, detail="Pet not found")

    # Error mapping
    @app.exception_handler(ScanError)
    async def scan_error_handler(request: Request, exc: ScanError):
        return JSONResponse(
            status_code=422,
            content={"error": exc.kind, "detail": exc.message, "context": exc.details},
        )

    @app.exception_handler(DuplicatePetError)
    async def duplicate_pet_handler(request: Request, exc: DuplicatePetError):
        return JSONResponse(status_code=422, content={"error": "duplicate_name", "detail": exc.message})

    @app.exception_handler(RateLimitExceededError)
    async def rate_limit_handler(request: Request, exc: RateLimitExceededError):
        return JSONResponse(
            status_code=429,
            content={"error": "rate_limited", "detail": exc.message},
            headers={"Retry-After": str(max(1, int(exc.retry_after + 0.999)))},
        )

    @app.exception_handler(CompletionError)
    async def completion_error_handler(request: Request, exc: CompletionError):
        return JSONResponse(status_code=502, content={"error": "completion_failed", "detail": exc.message})

    @app.middleware("http")
    async def log_context(request: Request, call_next):
        with LogContext(user_id=request.cookies.get(settings.api.cookie_name), path=request.url.path):
            return await call_next(request)

    # Routes
    @app.get("/")
    async def root():
        return {"message": app.title, "version": app.version}

    @app.get("/api/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/api/reference-chart")
    async def reference_chart():
        return chart_to_dict(reader.chart)

    @app.get("/api/pets")
    async def list_pets(pets: PetRepository = Depends(pet_repository)):
        items = pets.get_all()
        return {"count": len(items), "pets": [p.model_dump(mode="json") for p in items]}

    @app.post("/api/pets", status_code=201)
    async def create_pet(request: PetCreate, pets: PetRepository = Depends(pet_repository)):
        pet = pets.add(Pet(**request.model_dump()))
        return pet.model_dump(mode="json")

    @app.get("/api/pets/{pet_id}")
    async def get_pet(pet_id: UUID, pets: PetRepository = Depends(pet_repository)):
        pet = pets.get(pet_id)
        if pet is None:
            raise HTTPException(status_code=404, detail="Pet not found")
        return pet.model_dump(mode="json")

    @app.put("/api/pets/{pet_id}")
    async def update_pet(
        pet_id: UUID, request: PetUpdate, pets: PetRepository = Depends(pet_repository)
    ):
        changes = request.model_dump(exclude_none=True)
        try:
            pet = pets.update(pet_id, **changes)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=str(e))
        if pet is None:
            raise HTTPException(status_code=404, detail="Pet not found")
        return pet.model_dump(mode="json")

    @app.delete("/api/pets/{pet_id}")
    async def delete_pet(pet_id: UUID, pets: PetRepository = Depends(pet_repository)):
        if not pets.delete(pet_id):
            raise HTTPException(status_code=404, detail="Pet not found")
        return {"success": True}

    @app.post("/api/scan")
    async def scan(
        file: UploadFile = File(...),
        sample_config: Optional[str] = Form(None),
        pet_id: Optional[UUID] = Form(None),
        save: bool = Form(False),
        pets: PetRepository = Depends(pet_repository),
        records: RecordRepository = Depends(record_repository),
    ):
        """Read dipstick pads from an uploaded camera frame."""
        content = await file.read()
        if not content:
            raise HTTPException(status_code=400, detail="Empty upload")
        if len(content) > max_upload_bytes:
            raise HTTPException(status_code=413, detail="Upload too large")

        config = None
        if sample_config:
            try:
                config = SampleConfig.model_validate_json(sample_config)
            except ValidationError as e:
                raise HTTPException(status_code=422, detail=f"Invalid sample_config: {e}")

        require_pet(pets, pet_id)

        try:
            report = reader.read(content, config)
        except ImageDecodeError as e:
            logger.info(f"Rejected upload {file.filename}: {e}")
            raise HTTPException(status_code=400, detail="Upload is not a readable image")

        body = {
            "id": str(report.id),
            "image_size": list(report.image_size),
            "results": [
                {
                    "parameter_key": r.parameter_key,
                    "name": reader.chart[r.parameter_key].name,
                    "unit": reader.chart[r.parameter_key].unit,
                    "detected_color": list(r.detected_color),
                    "label": r.matched_pad.label,
                    "value": r.matched_pad.value,
                    "pad_color": list(r.matched_pad.color),
                    "level": r.pad_index,
                    "distance": round(r.distance, 2),
                }
                for r in report.results
            ],
        }

        if save:
            readings = report.as_readings(reader.chart)
            record = records.add(
                HealthRecord(
                    pet_id=pet_id,
                    source=RecordSource.SCAN,
                    readings=readings,
                    health_score=health_score(readings, penalty_per_level=penalty),
                )
            )
            body["record_id"] = str(record.id)
            body["health_score"] = record.health_score

        return body

    @app.post("/api/scan/analyze")
    async def analyze(
        request: AnalyzeRequest,
        pets: PetRepository = Depends(pet_repository),
        records: RecordRepository = Depends(record_repository),
    ):
        """Run the simulated analysis and save the record."""
        require_pet(pets, request.pet_id)
        readings = generate_readings(reader.chart, generator)
        record = records.add(
            HealthRecord(
                pet_id=request.pet_id,
                source=RecordSource.SIMULATED,
                readings=readings,
                health_score=health_score(readings, penalty_per_level=penalty),
            )
        )
        return record.model_dump(mode="json")

    @app.get("/api/records")
    async def list_records(
        pet_id: Optional[UUID] = None,
        limit: int = 50,
        records: RecordRepository = Depends(record_repository),
    ):
        items = records.find(pet_id=pet_id, limit=max(1, min(limit, 500)))
        return {"count": len(items), "records": [r.model_dump(mode="json") for r in items]}

    @app.post("/api/chat")
    async def chat(
        request: ChatRequest,
        pets: PetRepository = Depends(pet_repository),
        records: RecordRepository = Depends(record_repository),
    ):
        """Chat with the pet health assistant."""
        if assistant is None:
            raise HTTPException(status_code=503, detail="Chat assistant is not configured")
        try:
            response = await assistant.chat(request.message, pets, records)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return {"response": response}

    return app


def main():
    """Run the API server."""
    try:
        import uvicorn
    except ImportError:
        raise ImportError("uvicorn is required. Install with: pip install petcheck[api]")

    from petcheck.core.logging import setup_logging

    settings = get_settings()
    setup_logging(level=settings.log_level)
    if settings.storage.backend == StorageBackend.JSON:
        settings.ensure_directories()
    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )


if __name__ == "__main__":
    main()
