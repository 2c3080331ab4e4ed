#  Agent Dashboard - Pydantic Schemas
#
#  Request/response models for the REST API, plus the user upsert patch.
#
#  Depends on: models/enums.py
#  Used by:    routes/*, services/*

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dashboard.models.enums import (
    AgentStatus,
    MessageRole,
    TaskPriority,
    TaskStatus,
    UserRole,
)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserUpsert(BaseModel):
    """Patch applied by UserService.upsert_user.

    Only fields explicitly set are written (model_dump(exclude_unset=True)).
    An explicit None clears name/email/login_method; an omitted field is
    left untouched on the update path.
    """
    open_id: str
    name: str | None = None
    email: str | None = None
    login_method: str | None = None
    role: UserRole | None = None
    last_signed_in: float | None = None


class UserOut(BaseModel):
    id: int
    open_id: str
    name: str | None = None
    email: str | None = None
    login_method: str | None = None
    role: UserRole
    created_at: float
    updated_at: float
    last_signed_in: float


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------

class AgentOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    role: str
    status: AgentStatus
    current_task_id: int | None = None
    capabilities: Any = None
    max_context_length: int | None = None
    tasks_completed: int | None = 0
    total_tokens_used: int | None = 0
    average_response_time: float | None = 0.0
    success_rate: float | None = 100.0
    last_activity_at: float | None = None
    created_at: float
    updated_at: float


class AgentStats(BaseModel):
    total_agents: int
    active_agents: int
    idle_agents: int
    error_agents: int
    total_tasks_completed: int
    average_success_rate: float


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

class TaskOut(BaseModel):
    id: int
    title: str
    description: str | None = None
    agent_id: int | None = None
    status: TaskStatus
    priority: TaskPriority
    input: Any = None
    output: Any = None
    error: str | None = None
    tokens_used: int | None = 0
    estimated_cost: float | None = 0.0
    actual_cost: float | None = 0.0
    execution_time_ms: int | None = None
    started_at: float | None = None
    completed_at: float | None = None
    created_at: float
    updated_at: float


class TaskStats(BaseModel):
    total: int
    pending: int
    running: int
    completed: int
    failed: int
    cancelled: int
    total_cost: float
    average_execution_time: float


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

class SessionCreate(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_used: str = Field(..., min_length=1, max_length=64)
    title: str | None = Field(default=None, max_length=255)


class SessionCreated(BaseModel):
    session_id: int


class ChatSessionOut(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    id: int
    user_id: int
    title: str | None = None
    model_used: str
    total_tokens_used: int | None = 0
    total_cost: float | None = 0.0
    message_count: int | None = 0
    created_at: float
    updated_at: float


class ChatMessageOut(BaseModel):
    id: int
    session_id: int
    role: MessageRole
    content: str
    model: str | None = None
    tokens_used: int | None = None
    cost: float | None = None
    metadata: dict | None = None
    created_at: float


class SendMessageRequest(BaseModel):
    session_id: int
    message: str = Field(..., min_length=1, max_length=100_000)
    model: str = Field(..., min_length=1, max_length=64)


class SendMessageResponse(BaseModel):
    response: str
    tokens_used: int
    model: str


class ChatModelOut(BaseModel):
    """Entry in the static chat model catalog."""
    id: str
    name: str
    provider: str
    context_length: int
    cost_per_1k_tokens: float
    supports_vision: bool = False


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

class SystemMetricsOut(BaseModel):
    id: int | None = None
    timestamp: float | None = None
    total_tasks_completed: int | None = 0
    total_tasks_failed: int | None = 0
    success_rate: float | None = 100.0
    average_response_time_ms: float | None = 0.0
    total_tokens_used: int | None = 0
    total_cost_usd: float | None = 0.0
    active_agents: int | None = 0
    idle_agents: int | None = 0
    error_agents: int | None = 0
    system_health: float | None = 100.0
    created_at: float | None = None


class ModelUsageOut(BaseModel):
    id: int
    name: str
    provider: str
    usage_count: int
    total_tokens_used: int
    total_cost: float
    average_latency_ms: float
    context_length: int | None = None
    supports_vision: bool
    supports_streaming: bool


class CostBreakdownItem(BaseModel):
    model: str
    cost: float
    usage: int


# ---------------------------------------------------------------------------
# Knowledge base & generated skills
# ---------------------------------------------------------------------------

class KnowledgeEntryOut(BaseModel):
    id: int
    title: str
    content: str
    category: str | None = None
    source: str | None = None
    relevance_score: float | None = None
    access_count: int | None = 0
    created_at: float
    updated_at: float


class GeneratedSkillOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    skill_code: str | None = None
    generated_from: str | None = None
    success_rate: float | None = 0.0
    usage_count: int | None = 0
    is_active: bool | None = True
    performance_metrics: Any = None
    created_at: float
    updated_at: float
