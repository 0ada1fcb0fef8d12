"""
Step-Up HTTP Endpoints
======================
FastAPI router exposing the verification steps.

Every endpoint takes the opaque ``AuthState`` query parameter. Redirects
become 303 responses to the named route, views are returned as JSON for
the host to render, and a resume is handed to the host's callback.
"""

from typing import Any, Awaitable, Callable, Dict, Optional
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse, RedirectResponse, Response
import structlog

from .controller import (
    VerificationController,
    Continuation,
    Resume,
    Redirect,
    View,
    STATE_PARAM,
)
from .exceptions import StepUpError

logger = structlog.get_logger(__name__)

USER_FRIENDLY_MESSAGE = "Verification could not be completed. Please try again later."

ResumeCallback = Callable[[Dict[str, Any]], Awaitable[Response]]


def create_error_response(exc: StepUpError) -> JSONResponse:
    """
    Turn a step-up error into a response.

    Client errors carry their message; everything else is logged with its
    internal code and answered with a generic message.
    """
    if exc.status_code < 500:
        logger.info("Rejected step-up request", code=exc.code, error=exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "Bad request", "message": exc.message, "code": exc.code},
        )

    logger.error("Step-up request failed", code=exc.code, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "Verification failed", "message": USER_FRIENDLY_MESSAGE, "code": exc.code},
    )


def create_stepup_router(
    controller: VerificationController,
    resume: ResumeCallback,
    prefix: str = "",
) -> APIRouter:
    """
    Create the router for the verification steps.

    Args:
        controller: Controller implementing the state machine
        resume: Coroutine called with the original authentication context
            once the code is accepted; its response is returned as-is
        prefix: Optional URL prefix for all routes

    Returns:
        FastAPI router
    """
    router = APIRouter(prefix=prefix, tags=["StepUp"])

    async def respond(request: Request, step: Awaitable[Continuation]) -> Response:
        try:
            continuation = await step
        except StepUpError as e:
            return create_error_response(e)

        if isinstance(continuation, Redirect):
            url = request.url_for(continuation.target).include_query_params(**continuation.params)
            return RedirectResponse(url=str(url), status_code=303)
        if isinstance(continuation, View):
            return JSONResponse({"template": continuation.template, "data": continuation.data})
        if isinstance(continuation, Resume):
            return await resume(continuation.context)
        raise TypeError(f"Unknown continuation: {continuation!r}")

    async def get_param(request: Request, name: str) -> Optional[str]:
        value = request.query_params.get(name)
        if value is None and request.method == "POST":
            form = await request.form()
            value = form.get(name)
        return value

    @router.get("/enterCode", name="enterCode")
    async def enter_code(request: Request) -> Response:
        """Code entry page."""
        state_id = request.query_params.get(STATE_PARAM)
        return await respond(request, controller.enter_code(state_id))

    @router.api_route("/validateCode", methods=["GET", "POST"], name="validateCode")
    async def validate_code(request: Request) -> Response:
        """Check the submitted ``otp`` value."""
        state_id = await get_param(request, STATE_PARAM)
        otp = await get_param(request, "otp")
        return await respond(request, controller.validate_code(state_id, otp))

    @router.get("/promptResend", name="promptResend")
    async def prompt_resend(request: Request) -> Response:
        """Explain why a new code is needed."""
        state_id = request.query_params.get(STATE_PARAM)
        return await respond(request, controller.prompt_resend(state_id))

    @router.get("/resendCode", name="resendCode")
    async def resend_code(request: Request) -> Response:
        """Resend prompt reached after a code expired."""
        state_id = request.query_params.get(STATE_PARAM)
        return await respond(request, controller.prompt_resend(state_id))

    @router.api_route("/sendCode", methods=["GET", "POST"], name="sendCode")
    async def send_code(request: Request) -> Response:
        """Generate and send a fresh code."""
        state_id = await get_param(request, STATE_PARAM)
        return await respond(request, controller.send_code(state_id))

    @router.api_route("/requestResend", methods=["GET", "POST"], name="requestResend")
    async def request_resend(request: Request) -> Response:
        """User asked for a new code from the entry page."""
        state_id = await get_param(request, STATE_PARAM)
        return await respond(request, controller.request_resend(state_id))

    return router
