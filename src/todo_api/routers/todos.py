from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, Request, status

from ..schemas import ErrorOut, TodoIn, TodoOut
from ..services import TodoService

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_NOT_FOUND = {404: {"model": ErrorOut, "description": "Todo not found"}}


def _get_service(request: Request) -> TodoService:
    """
    Dependency returning the TodoService wired into the app at startup.
    """
    return request.app.state.todo_service


def _todo_id() -> int:
    return Path(..., ge=_INT64_MIN, le=_INT64_MAX, description="Todo id (64-bit signed integer)")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="List every Todo item, newest first (ties broken by id, highest first).",
)
@router.get("/", response_model=List[TodoOut], include_in_schema=False)
def list_todos(service: TodoService = Depends(_get_service)) -> List[TodoOut]:
    """
    List all todos ordered by creation time, descending.
    """
    return [TodoOut(**t) for t in service.list()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        400: {"description": "Malformed id"},
        **_NOT_FOUND,
    },
)
def get_todo(
    todo_id: int = _todo_id(),
    service: TodoService = Depends(_get_service),
) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    return TodoOut(**service.get(todo_id))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Create a new Todo item and return the created resource. "
        "Client-supplied id, createdAt and updatedAt are ignored; completed defaults to false."
    ),
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Validation error"},
    },
)
@router.post("/", response_model=TodoOut, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_todo(payload: TodoIn, service: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Create a new Todo.
    """
    return TodoOut(**service.create(payload))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description=(
        "Replace title, description and completed of an existing Todo item. "
        "An omitted completed flag keeps its stored value."
    ),
    responses={
        200: {"description": "Todo updated"},
        400: {"description": "Validation error"},
        **_NOT_FOUND,
    },
)
def update_todo(
    payload: TodoIn,
    todo_id: int = _todo_id(),
    service: TodoService = Depends(_get_service),
) -> TodoOut:
    """
    Update an existing Todo; createdAt is preserved and updatedAt refreshed.
    """
    return TodoOut(**service.update(todo_id, payload))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        **_NOT_FOUND,
    },
)
def delete_todo(
    todo_id: int = _todo_id(),
    service: TodoService = Depends(_get_service),
) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    service.delete(todo_id)
    return None
