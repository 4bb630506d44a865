"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from nutrition_assistant.api.models import (
    ChatRequest,
    ProfilePayload,
    RegeneratePlanRequest,
    needs_to_payload,
)
from nutrition_assistant.app_logging import configure_logging
from nutrition_assistant.containers import AppContainer
from nutrition_assistant.domain.chat import ChatReply
from nutrition_assistant.domain.errors import (
    EmptyMessage,
    GenerationFailed,
    InvalidMedication,
    InvalidProfile,
)
from nutrition_assistant.services.meal_plans import GeneratedPlan
from nutrition_assistant.services.nutrition import compute_nutritional_needs

_UNPROCESSABLE_STATUS = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidMedication)
    async def invalid_medication(
        request: Request, exc: InvalidMedication
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_UNPROCESSABLE_STATUS,
            content={
                "status": "error",
                "message": str(exc),
                "index": exc.index,
                "fields": exc.fields,
            },
        )

    @app.exception_handler(InvalidProfile)
    @app.exception_handler(EmptyMessage)
    async def invalid_input(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=_UNPROCESSABLE_STATUS,
            content={"status": "error", "message": str(exc)},
        )

    @app.exception_handler(GenerationFailed)
    async def generation_failed(
        request: Request, exc: GenerationFailed
    ) -> JSONResponse:
        logger.warning("Generation failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"status": "error", "message": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition/needs")
    async def nutritional_needs(profile: ProfilePayload) -> dict[str, object]:
        """Compute nutritional targets for a profile."""
        needs = compute_nutritional_needs(profile.to_domain())
        stamped = replace(needs, last_calculated=datetime.now(tz=UTC))
        return {"status": "ok", "nutritionalNeeds": needs_to_payload(stamped)}

    @app.post("/meal-plans", status_code=status.HTTP_201_CREATED)
    async def create_meal_plan(
        profile: ProfilePayload, request: Request
    ) -> dict[str, object]:
        """Generate the initial weekly plan for a profile."""
        state_container: AppContainer = request.app.state.container
        generated = await state_container.meal_plan_service.generate_initial_plan(
            profile.to_domain()
        )
        return _plan_response(generated)

    @app.post("/meal-plans/regenerate")
    async def regenerate_meal_plan(
        payload: RegeneratePlanRequest, request: Request
    ) -> dict[str, object]:
        """Apply profile changes and generate a replacement plan."""
        state_container: AppContainer = request.app.state.container
        generated = await state_container.meal_plan_service.regenerate_plan(
            payload.profile.to_domain(), payload.changes.to_domain()
        )
        return _plan_response(generated)

    @app.post("/chat")
    async def chat(payload: ChatRequest, request: Request) -> dict[str, object]:
        """Route a chat message to the matching handler."""
        state_container: AppContainer = request.app.state.container
        reply = await state_container.chat_service.handle_message(
            payload.profile.to_domain(), payload.message, payload.weekday
        )
        return _chat_response(reply)

    @app.post("/documents/analyze")
    async def analyze_document(
        request: Request,
        file: UploadFile = File(...),
        profile: str | None = Form(default=None),
    ) -> dict[str, object]:
        """Extract text from an uploaded medical document and analyze it."""
        state_container: AppContainer = request.app.state.container
        person = None
        if profile:
            try:
                person = ProfilePayload.model_validate_json(profile).to_domain()
            except ValidationError as exc:
                raise HTTPException(
                    status_code=_UNPROCESSABLE_STATUS,
                    detail=exc.errors(include_url=False),
                ) from exc
        content = await file.read()
        extracted = await run_in_threadpool(
            state_container.document_extractor.extract_text,
            content,
            file.content_type or "",
        )
        if not extracted:
            logger.info(
                "No text extracted from upload", extra={"upload": file.filename}
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Could not extract text from the uploaded document",
            )
        reply = await state_container.chat_service.analyze_document(extracted, person)
        return {
            "status": "ok",
            "extractedText": extracted,
            "analysis": reply.text,
            "type": reply.type,
        }

    return app


def _plan_response(generated: GeneratedPlan) -> dict[str, object]:
    """Serialize a generated plan with its targets."""
    return {
        "status": "ok",
        "mealPlan": generated.meal_plan.model_dump(by_alias=True),
        "nutritionalNeeds": needs_to_payload(generated.nutritional_needs),
    }


def _chat_response(reply: ChatReply) -> dict[str, object]:
    """Serialize a chat reply for the client."""
    if reply.modification is not None:
        body: object = reply.modification.model_dump(by_alias=True)
    else:
        body = reply.text
    response: dict[str, object] = {"status": "ok", "type": reply.type, "reply": body}
    if reply.nutritional_needs is not None:
        response["nutritionalNeeds"] = needs_to_payload(reply.nutritional_needs)
    return response
