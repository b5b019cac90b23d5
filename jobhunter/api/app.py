"""FastAPI web application for jobhunter."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from jobhunter import __version__
from jobhunter.database.database import get_db, init_db
from jobhunter.database.job_repository import JobRepository
from jobhunter.database.kv_store import KeyValueStore, SqlKeyValueStore
from jobhunter.database.state_repository import StateRepository
from jobhunter.exceptions import (
    ContactNotFoundError,
    InvalidJobError,
    InvalidTaskError,
    JobNotFoundError,
    TaskNotFoundError,
)
from jobhunter.models.constants import DEFAULT_TASKS
from jobhunter.models.history import ProgressSummary
from jobhunter.models.job import Contact, ContactStatus, JobApplication, JobStatus
from jobhunter.models.state import AppState, Settings
from jobhunter.models.task import TaskFrequency, TaskRecord, View
from jobhunter.services.job_board import JobBoard
from jobhunter.services.tracker import Clock, TrackerSession


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    app.state.writer_lock = asyncio.Lock()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="jobhunter API",
    description="Daily and weekly job-search checklist with streaks",
    version=__version__,
    lifespan=lifespan,
)


# ---- dependencies ----

def _writer_lock(request: Request) -> asyncio.Lock:
    """One logical writer: requests that load and save blobs never interleave.

    The lock is awaited on the event loop, so queued requests hold no worker
    thread while they wait.
    """
    lock = getattr(request.app.state, "writer_lock", None)
    if lock is None:
        lock = request.app.state.writer_lock = asyncio.Lock()
    return lock


def get_kv_store(db: Session = Depends(get_db)) -> KeyValueStore:
    return SqlKeyValueStore(db)


def get_state_repository(store: KeyValueStore = Depends(get_kv_store)) -> StateRepository:
    return StateRepository(store)


def get_job_repository(store: KeyValueStore = Depends(get_kv_store)) -> JobRepository:
    return JobRepository(store)


def get_clock() -> Clock:
    return datetime.now


async def get_tracker(
    request: Request,
    repository: StateRepository = Depends(get_state_repository),
    clock: Clock = Depends(get_clock),
) -> AsyncIterator[TrackerSession]:
    """Load the tracker (applying any day/week rollover) for one request."""
    async with _writer_lock(request):
        yield await run_in_threadpool(TrackerSession.load, repository, DEFAULT_TASKS, clock)


async def get_job_board(
    request: Request,
    repository: JobRepository = Depends(get_job_repository),
) -> AsyncIterator[JobBoard]:
    async with _writer_lock(request):
        yield JobBoard(repository)


def _explicit_clear(request: BaseModel, field: str, value):
    """Map an explicit JSON null to "" (clear); an omitted field stays None (unchanged)."""
    if value is None and field in request.model_fields_set:
        return ""
    return value


# ---- request / response models ----

class TaskCreateRequest(BaseModel):
    """Request body for adding a task."""
    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(..., min_length=1)
    target: int = Field(1, ge=1)
    frequency: TaskFrequency = TaskFrequency.DAILY
    linked_view: Optional[View] = Field(None, alias="linkedView")
    external_url: Optional[str] = Field(None, alias="externalUrl")


class TaskUpdateRequest(BaseModel):
    """Request body for editing a task.

    Omitted fields are left unchanged; ``null`` clears ``linkedView`` or ``externalUrl``.
    """
    model_config = ConfigDict(populate_by_name=True)

    label: Optional[str] = None
    target: Optional[int] = Field(None, ge=1)
    frequency: Optional[TaskFrequency] = None
    linked_view: Optional[View] = Field(None, alias="linkedView")
    external_url: Optional[str] = Field(None, alias="externalUrl")


class TaskOrderRequest(BaseModel):
    """Request body for reordering tasks."""
    model_config = ConfigDict(populate_by_name=True)

    task_ids: List[int] = Field(..., alias="taskIds")


class TaskResponse(BaseModel):
    """Response for single-task operations."""
    task: TaskRecord


class TaskListResponse(BaseModel):
    """Response for operations that return the ordered task list."""
    tasks: List[TaskRecord]


class ProgressResponse(BaseModel):
    """Response for progress mutations: the task plus the refreshed summary."""
    task: TaskRecord
    progress: ProgressSummary


class DeleteResponse(BaseModel):
    """Response for task removal."""
    deleted_id: int
    tasks: List[TaskRecord]


class JobCreateRequest(BaseModel):
    """Request body for adding a job application."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    post_url: str = Field("", alias="postUrl")
    description: str = ""
    status: JobStatus = JobStatus.SAVED


class JobUpdateRequest(BaseModel):
    """Request body for editing a job application; omitted fields are left unchanged."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    company: Optional[str] = None
    post_url: Optional[str] = Field(None, alias="postUrl")
    description: Optional[str] = None
    status: Optional[JobStatus] = None


class ContactCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    linkedin: str = ""


class ContactUpdateRequest(BaseModel):
    status: ContactStatus


class JobListResponse(BaseModel):
    jobs: List[JobApplication]


class JobDeleteResponse(BaseModel):
    deleted_id: int
    jobs: List[JobApplication]


# ---- routes ----

@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/state", response_model=AppState)
def get_state(tracker: TrackerSession = Depends(get_tracker)):
    """Full tracker state after load-time rollover."""
    return tracker.state


@app.get("/progress", response_model=ProgressSummary)
def get_progress(tracker: TrackerSession = Depends(get_tracker)):
    """Today's completed/total, streak and the 7-day history window."""
    return tracker.progress()


@app.get("/tasks", response_model=TaskListResponse)
def list_tasks(tracker: TrackerSession = Depends(get_tracker)):
    return TaskListResponse(tasks=tracker.tasks)


@app.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(request: TaskCreateRequest, tracker: TrackerSession = Depends(get_tracker)):
    """Add a user task at the end of the checklist."""
    try:
        task = tracker.add_task(
            label=request.label,
            target=request.target,
            frequency=request.frequency,
            linked_view=request.linked_view,
            external_url=request.external_url,
        )
    except InvalidTaskError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return TaskResponse(task=task)


@app.put("/tasks/order", response_model=TaskListResponse)
def reorder_tasks(request: TaskOrderRequest, tracker: TrackerSession = Depends(get_tracker)):
    """Set the display order of the checklist."""
    try:
        tasks = tracker.reorder_tasks(request.task_ids)
    except InvalidTaskError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return TaskListResponse(tasks=tasks)


@app.post("/tasks/restore-defaults", response_model=TaskListResponse)
def restore_defaults(tracker: TrackerSession = Depends(get_tracker)):
    """Re-add any default task that is missing."""
    return TaskListResponse(tasks=tracker.restore_defaults())


@app.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, request: TaskUpdateRequest, tracker: TrackerSession = Depends(get_tracker)):
    """Edit label, target, frequency or links of a task."""
    try:
        task = tracker.update_task(
            task_id,
            label=request.label,
            target=request.target,
            frequency=request.frequency,
            linked_view=_explicit_clear(request, "linked_view", request.linked_view),
            external_url=_explicit_clear(request, "external_url", request.external_url),
        )
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTaskError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return TaskResponse(task=task)


@app.delete("/tasks/{task_id}", response_model=DeleteResponse)
def delete_task(task_id: int, tracker: TrackerSession = Depends(get_tracker)):
    try:
        tracker.remove_task(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return DeleteResponse(deleted_id=task_id, tasks=tracker.tasks)


def _progress_response(tracker: TrackerSession, task: TaskRecord) -> ProgressResponse:
    return ProgressResponse(task=task, progress=tracker.progress())


@app.post("/tasks/{task_id}/toggle", response_model=ProgressResponse)
def toggle_task(task_id: int, tracker: TrackerSession = Depends(get_tracker)):
    """Flip a task between done and not done."""
    try:
        task = tracker.toggle(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _progress_response(tracker, task)


@app.post("/tasks/{task_id}/increment", response_model=ProgressResponse)
def increment_task(task_id: int, tracker: TrackerSession = Depends(get_tracker)):
    try:
        task = tracker.increment(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _progress_response(tracker, task)


@app.post("/tasks/{task_id}/decrement", response_model=ProgressResponse)
def decrement_task(task_id: int, tracker: TrackerSession = Depends(get_tracker)):
    try:
        task = tracker.decrement(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _progress_response(tracker, task)


@app.post("/reset", response_model=AppState)
def reset_all(tracker: TrackerSession = Depends(get_tracker)):
    """Clear tasks, streaks and history; start over from the default tasks."""
    return tracker.reset_all()


@app.get("/settings", response_model=Settings)
def get_settings(tracker: TrackerSession = Depends(get_tracker)):
    return tracker.get_settings()


@app.put("/settings", response_model=Settings)
def put_settings(settings: Settings, tracker: TrackerSession = Depends(get_tracker)):
    """Choose which view opens first."""
    return tracker.update_settings(settings)


# ---- job applications ----

@app.get("/jobs", response_model=JobListResponse)
def list_jobs(board: JobBoard = Depends(get_job_board)):
    return JobListResponse(jobs=board.list_jobs())


@app.post("/jobs", response_model=JobApplication, status_code=status.HTTP_201_CREATED)
def create_job(request: JobCreateRequest, board: JobBoard = Depends(get_job_board)):
    """Track a new job application. Title and company are required."""
    try:
        return board.add_job(
            title=request.title,
            company=request.company,
            post_url=request.post_url,
            description=request.description,
            status=request.status,
        )
    except InvalidJobError as e:
        raise HTTPException(status_code=422, detail=e.message)


@app.get("/jobs/{job_id}", response_model=JobApplication)
def get_job(job_id: int, board: JobBoard = Depends(get_job_board)):
    try:
        return board.get_job(job_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.patch("/jobs/{job_id}", response_model=JobApplication)
def update_job(job_id: int, request: JobUpdateRequest, board: JobBoard = Depends(get_job_board)):
    """Edit details or move the application to another stage."""
    try:
        return board.update_job(
            job_id,
            title=request.title,
            company=request.company,
            post_url=request.post_url,
            description=request.description,
            status=request.status,
        )
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidJobError as e:
        raise HTTPException(status_code=422, detail=e.message)


@app.delete("/jobs/{job_id}", response_model=JobDeleteResponse)
def delete_job(job_id: int, board: JobBoard = Depends(get_job_board)):
    try:
        jobs = board.remove_job(job_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return JobDeleteResponse(deleted_id=job_id, jobs=jobs)


@app.post("/jobs/{job_id}/contacts", response_model=Contact, status_code=status.HTTP_201_CREATED)
def add_contact(job_id: int, request: ContactCreateRequest, board: JobBoard = Depends(get_job_board)):
    try:
        return board.add_contact(job_id, name=request.name, linkedin=request.linkedin)
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidJobError as e:
        raise HTTPException(status_code=422, detail=e.message)


@app.patch("/jobs/{job_id}/contacts/{contact_id}", response_model=Contact)
def update_contact(job_id: int, contact_id: int, request: ContactUpdateRequest, board: JobBoard = Depends(get_job_board)):
    """Record outreach progress for a contact."""
    try:
        return board.update_contact_status(job_id, contact_id, request.status)
    except (JobNotFoundError, ContactNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.delete("/jobs/{job_id}/contacts/{contact_id}", response_model=JobApplication)
def remove_contact(job_id: int, contact_id: int, board: JobBoard = Depends(get_job_board)):
    try:
        return board.remove_contact(job_id, contact_id)
    except (JobNotFoundError, ContactNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
