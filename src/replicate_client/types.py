"""Typed request options and response models for the Replicate API."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar, Union

from replicate_client.utils.exceptions import ValidationError

T = TypeVar("T")


class PredictionStatus:
    """Status values reported by the API for predictions and trainings."""

    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


TERMINAL_STATUSES = frozenset(
    {PredictionStatus.SUCCEEDED, PredictionStatus.FAILED, PredictionStatus.CANCELED}
)
ACTIVE_STATUSES = frozenset({PredictionStatus.STARTING, PredictionStatus.PROCESSING})

DEFAULT_POLL_INTERVAL = 1.0


def is_terminal(status: Optional[str]) -> bool:
    """Check whether a status is terminal.

    Unrecognized values are treated as non-terminal so polling continues.
    """
    return status in TERMINAL_STATUSES


def is_active(status: Optional[str]) -> bool:
    """Check whether a status is one of the known in-progress values."""
    return status in ACTIVE_STATUSES


@dataclass
class ModelReference:
    """Owner, name and optional version identifying a model.

    Parsed from identifiers shaped like ``owner/name`` or
    ``owner/name:version``.
    """

    owner: str
    name: str
    version: Optional[str] = None

    @classmethod
    def parse(cls, identifier: str) -> "ModelReference":
        """Parse a model identifier.

        Args:
            identifier: ``owner/name`` or ``owner/name:version``

        Returns:
            ModelReference

        Raises:
            ValidationError: If the identifier is malformed
        """
        if not identifier or identifier.count("/") != 1:
            raise ValidationError(
                f"Invalid model identifier '{identifier}'. "
                f"Expected 'owner/name' or 'owner/name:version'"
            )

        owner, rest = identifier.split("/")
        name, _, version = rest.partition(":")
        if not owner or not name or (":" in rest and not version):
            raise ValidationError(
                f"Invalid model identifier '{identifier}'. "
                f"Expected 'owner/name' or 'owner/name:version'"
            )

        return cls(owner=owner, name=name, version=version or None)

    def __str__(self) -> str:
        if self.version:
            return f"{self.owner}/{self.name}:{self.version}"
        return f"{self.owner}/{self.name}"


@dataclass
class WaitOptions:
    """Polling configuration for waiting on a prediction."""

    interval: float = DEFAULT_POLL_INTERVAL

    def validate(self) -> bool:
        """Validate polling interval."""
        if self.interval < 0:
            raise ValidationError(f"Poll interval must not be negative: {self.interval}")
        return True

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "WaitOptions":
        if not data:
            return cls()
        return cls(interval=float(data.get("interval", DEFAULT_POLL_INTERVAL)))


@dataclass
class RunOptions:
    """Options for submitting a prediction.

    ``wait`` is either a boolean or a WaitOptions. Only ``wait=True`` sends
    the ``Prefer: wait`` header; a WaitOptions only changes the poll interval.
    """

    input: Dict[str, Any] = field(default_factory=dict)
    webhook: Optional[str] = None
    webhook_events_filter: Optional[List[str]] = None
    wait: Union[bool, WaitOptions] = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RunOptions":
        """Build options from a free-form options mapping.

        Args:
            data: Mapping with ``input`` and optional ``webhook``,
                ``webhook_events_filter`` and ``wait`` keys. ``wait`` may be a
                bool or a mapping with an ``interval`` key.

        Returns:
            RunOptions
        """
        wait = data.get("wait", False)
        if isinstance(wait, Mapping):
            wait = WaitOptions.from_dict(wait)

        return cls(
            input=dict(data.get("input") or {}),
            webhook=data.get("webhook"),
            webhook_events_filter=data.get("webhook_events_filter"),
            wait=wait,
        )

    @property
    def prefer_wait(self) -> bool:
        return self.wait is True

    @property
    def poll_interval(self) -> float:
        if isinstance(self.wait, WaitOptions):
            return self.wait.interval
        return DEFAULT_POLL_INTERVAL

    def validate(self) -> bool:
        """Validate wait configuration."""
        if isinstance(self.wait, WaitOptions):
            self.wait.validate()
        return True

    def to_payload(self, version: str) -> Dict[str, Any]:
        """Build the request body for a prediction submission."""
        payload: Dict[str, Any] = {"version": version, "input": self.input}
        payload.update(self.webhook_payload())
        return payload

    def webhook_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.webhook is not None:
            payload["webhook"] = self.webhook
        if self.webhook_events_filter is not None:
            payload["webhook_events_filter"] = list(self.webhook_events_filter)
        return payload


@dataclass
class RunResult:
    """Output and id of a prediction that succeeded."""

    output: Any
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"output": self.output, "id": self.id}


@dataclass
class Prediction:
    """A single invocation of a model.

    ``raw`` keeps the full decoded response for fields not modelled here.
    """

    id: str
    status: str
    output: Any = None
    error: Optional[str] = None
    version: Optional[str] = None
    model: Optional[str] = None
    input: Dict[str, Any] = field(default_factory=dict)
    logs: Optional[str] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
    urls: Dict[str, str] = field(default_factory=dict)
    created_at: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Prediction":
        return cls(
            id=data["id"],
            status=data.get("status", ""),
            output=data.get("output"),
            error=data.get("error"),
            version=data.get("version"),
            model=data.get("model"),
            input=data.get("input") or {},
            logs=data.get("logs"),
            metrics=data.get("metrics") or {},
            urls=data.get("urls") or {},
            created_at=data.get("created_at"),
            started_at=data.get("started_at"),
            completed_at=data.get("completed_at"),
            raw=dict(data),
        )

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status)


@dataclass
class ModelVersion:
    """A published version of a model."""

    id: str
    created_at: Optional[str] = None
    cog_version: Optional[str] = None
    openapi_schema: Dict[str, Any] = field(default_factory=dict, repr=False)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModelVersion":
        return cls(
            id=data["id"],
            created_at=data.get("created_at"),
            cog_version=data.get("cog_version"),
            openapi_schema=data.get("openapi_schema") or {},
            raw=dict(data),
        )


@dataclass
class Model:
    """A model hosted on Replicate."""

    owner: str
    name: str
    description: Optional[str] = None
    visibility: Optional[str] = None
    latest_version: Optional[ModelVersion] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Model":
        latest = data.get("latest_version")
        return cls(
            owner=data.get("owner", ""),
            name=data.get("name", ""),
            description=data.get("description"),
            visibility=data.get("visibility"),
            latest_version=ModelVersion.from_dict(latest) if latest else None,
            raw=dict(data),
        )


@dataclass
class Deployment:
    """A deployment with a fixed model version and hardware."""

    owner: str
    name: str
    current_release: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Deployment":
        return cls(
            owner=data.get("owner", ""),
            name=data.get("name", ""),
            current_release=data.get("current_release") or {},
            raw=dict(data),
        )


@dataclass
class Training:
    """A fine-tuning job. Uses the same status values as Prediction."""

    id: str
    status: str
    model: Optional[str] = None
    version: Optional[str] = None
    input: Dict[str, Any] = field(default_factory=dict)
    output: Any = None
    error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Training":
        return cls(
            id=data["id"],
            status=data.get("status", ""),
            model=data.get("model"),
            version=data.get("version"),
            input=data.get("input") or {},
            output=data.get("output"),
            error=data.get("error"),
            raw=dict(data),
        )

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status)


@dataclass
class Collection:
    """A curated group of models."""

    slug: str
    name: Optional[str] = None
    description: Optional[str] = None
    models: List[Model] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Collection":
        return cls(
            slug=data["slug"],
            name=data.get("name"),
            description=data.get("description"),
            models=[Model.from_dict(m) for m in data.get("models") or []],
            raw=dict(data),
        )


@dataclass
class Account:
    """The account that owns the API token."""

    type: str
    username: str
    name: Optional[str] = None
    github_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Account":
        return cls(
            type=data.get("type", ""),
            username=data.get("username", ""),
            name=data.get("name"),
            github_url=data.get("github_url"),
            raw=dict(data),
        )


@dataclass
class WebhookSigningSecret:
    """Secret used to verify webhook payloads."""

    key: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WebhookSigningSecret":
        return cls(key=data["key"], raw=dict(data))


@dataclass
class Page(Generic[T]):
    """One page of a cursor-paginated list response."""

    results: List[T] = field(default_factory=list)
    next: Optional[str] = None
    previous: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], item_type: Callable[[Mapping[str, Any]], T]
    ) -> "Page[T]":
        return cls(
            results=[item_type(item) for item in data.get("results") or []],
            next=data.get("next"),
            previous=data.get("previous"),
            raw=dict(data),
        )

    def __iter__(self):
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)
