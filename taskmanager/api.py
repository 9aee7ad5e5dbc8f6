"""
Task API
========

FastAPI routes for the /tasks resource.

Routes translate HTTP into TaskLifecycleManager calls. Successful results go
through TaskMapper; NOT_FOUND results go through ErrorTranslator. Anything
raised below the routes reaches the application's 500 handler.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from .error_handlers import ErrorTranslator
from .logging_setup import RequestLogger
from .mapper import TaskMapper
from .models import ErrorResponse, TaskRequest, TaskResponse
from .service import TaskLifecycleManager

logger = logging.getLogger(__name__)

API_TITLE = "Task Manager API"
API_VERSION = "1.0.0"

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Task not found"}}
BAD_REQUEST_RESPONSE = {400: {"model": ErrorResponse, "description": "Validation failed"}}

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_manager(request: Request) -> TaskLifecycleManager:
    """Dependency returning the manager wired into the application."""
    return request.app.state.task_manager


def get_translator(request: Request) -> ErrorTranslator:
    return request.app.state.error_translator


def completed_or_default(payload: TaskRequest) -> bool:
    """An omitted completion flag means False."""
    return payload.completed if payload.completed is not None else False


@router.get("", response_model=List[TaskResponse])
def list_tasks(manager: TaskLifecycleManager = Depends(get_manager)):
    """List every task"""
    result = manager.list_all()
    return TaskMapper.to_models(result.value)


@router.get("/{task_id}", response_model=TaskResponse, responses=NOT_FOUND_RESPONSE)
def get_task(
    task_id: int,
    manager: TaskLifecycleManager = Depends(get_manager),
    translator: ErrorTranslator = Depends(get_translator),
):
    """Get one task by id"""
    result = manager.get_by_id(task_id)
    if not result.ok:
        return translator.to_response(result.error)
    return TaskMapper.to_model(result.value)


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST_RESPONSE,
)
def create_task(
    payload: TaskRequest,
    manager: TaskLifecycleManager = Depends(get_manager),
):
    """Create a task"""
    result = manager.create(
        title=payload.title,
        description=payload.description,
        completed=completed_or_default(payload),
    )
    return TaskMapper.to_model(result.value)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    responses={**NOT_FOUND_RESPONSE, **BAD_REQUEST_RESPONSE},
)
def update_task(
    task_id: int,
    payload: TaskRequest,
    manager: TaskLifecycleManager = Depends(get_manager),
    translator: ErrorTranslator = Depends(get_translator),
):
    """Replace a task's title, description and completion flag"""
    result = manager.update(
        task_id,
        title=payload.title,
        description=payload.description,
        completed=completed_or_default(payload),
    )
    if not result.ok:
        return translator.to_response(result.error)
    return TaskMapper.to_model(result.value)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND_RESPONSE,
)
def delete_task(
    task_id: int,
    manager: TaskLifecycleManager = Depends(get_manager),
    translator: ErrorTranslator = Depends(get_translator),
):
    """Delete a task"""
    result = manager.delete(task_id)
    if not result.ok:
        return translator.to_response(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(
    manager: TaskLifecycleManager,
    allowed_origins: Optional[List[str]] = None,
    translator: Optional[ErrorTranslator] = None,
) -> FastAPI:
    """
    Build the FastAPI application around a lifecycle manager.

    Args:
        manager: Lifecycle manager serving the routes
        allowed_origins: CORS origins; CORS is left off when None
        translator: Error translator, a default one when None

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=API_TITLE,
        description="CRUD service for task records",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.task_manager = manager
    app.state.error_translator = translator or ErrorTranslator()

    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestLogger)

    app.state.error_translator.register(app)
    app.include_router(router)

    logger.info("Task API application created")
    return app
