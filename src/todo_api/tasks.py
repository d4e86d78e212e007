import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request, status

from src.todo_api.auth_utils import check_admin_credentials, create_admin_access_token, require_token
from src.todo_api.errors import AuthenticationError
from src.todo_api.schemas import AdminLoginResponse, LoginRequest, Task, TaskCreate, TaskDeleted, TaskUpdate
from src.todo_api.task_store import TaskRepository

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api", tags=["Auth"])
router = APIRouter(prefix="/api/tasks", tags=["Tasks"], dependencies=[Depends(require_token)])


def get_task_repository(request: Request) -> TaskRepository:
    return TaskRepository(request.app.state.db)


@auth_router.post("/login", response_model=AdminLoginResponse, summary="Admin login")
def login(payload: LoginRequest, request: Request) -> AdminLoginResponse:
    """Check the configured admin pair and return a signed token valid for one day."""
    settings = request.app.state.settings
    if not check_admin_credentials(settings, payload.username, payload.password):
        raise AuthenticationError("Invalid credentials")
    token = create_admin_access_token(settings, payload.username)
    logger.info("Admin login for %s", payload.username)
    return AdminLoginResponse(token=token)


@router.get("", response_model=List[Task], summary="List tasks")
def list_tasks(tasks: TaskRepository = Depends(get_task_repository)) -> List[Dict[str, Any]]:
    """All tasks, newest first."""
    return tasks.list()


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED, summary="Create task")
def create_task(payload: TaskCreate, tasks: TaskRepository = Depends(get_task_repository)) -> Dict[str, Any]:
    """Create a task from trimmed, non-empty text."""
    return tasks.create(payload.text)


@router.put("/{task_id}", response_model=Task, summary="Update task")
def update_task(
    task_id: int,
    payload: Optional[TaskUpdate] = None,
    tasks: TaskRepository = Depends(get_task_repository),
) -> Dict[str, Any]:
    """Update text and/or completed; omitted fields keep their value."""
    payload = payload or TaskUpdate()
    return tasks.update(task_id, text=payload.text, completed=payload.completed)


@router.delete("/{task_id}", response_model=TaskDeleted, summary="Delete task")
def delete_task(task_id: int, tasks: TaskRepository = Depends(get_task_repository)) -> TaskDeleted:
    """Delete a task and echo the removed row."""
    task = tasks.delete(task_id)
    return TaskDeleted(message="Task deleted successfully", task=Task(**task))
