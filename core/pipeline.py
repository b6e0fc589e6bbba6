"""
Versioned Mutation Pipeline — Ordered, version-safe updates to one resource.

The commercetools API uses optimistic concurrency: every update must echo the
resource version most recently observed, and each successful update returns
the resource with a new, higher version. Updates also create sub-objects (for
example line items) whose generated ids are needed by later updates.

The pipeline threads both through an ordered list of steps:

    handle = VersionHandle.from_response(cart)          # (cart id, version)
    pipeline = VersionedMutationPipeline(client.update_cart, handle,
                                         references={"lineItemId": ...},
                                         sink=output_manager)
    result = pipeline.run([
        MutationStep("set shipping details", build=..., requires=("lineItemId",)),
        MutationStep("remove line item", build=..., invalidates=("lineItemId",)),
        MutationStep("add line item", build=..., extracts={"lineItemId": "lineItems[0].id"}),
    ])

For each step, in order:
  1. Check that every reference in `requires` exists and was not invalidated.
     A missing reference raises MissingReferenceError before anything is sent.
  2. Build the request body from the current version and the references.
  3. Record the request body as an artifact (if `request_artifact` is set).
  4. Submit it and wait for the response.
  5. Read the new version (must be greater than the previous one), drop the
     references listed in `invalidates`, then read the `extracts` paths.
  6. Record the (projected) response as an artifact (if `artifact` is set).

Any failure aborts the run with PipelineAbortedError. Later steps never run,
nothing is retried, and the remote resource keeps whatever state the last
successful step left it in.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .errors import (
    ExtractionError,
    MissingReferenceError,
    PipelineAbortedError,
)
from .json_query import extract


class PipelineState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class VersionHandle:
    """A resource id and the version most recently observed for it."""
    resource_id: str
    version: int

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "VersionHandle":
        return cls(extract(response, "id"), extract(response, "version"))

    def advance(self, new_version: int) -> "VersionHandle":
        """Return the handle for the next version; versions never go backwards."""
        if type(new_version) is not int or new_version <= self.version:
            raise ExtractionError(
                "version",
                f"Expected a version greater than {self.version} for {self.resource_id}, "
                f"got {new_version!r}",
            )
        return VersionHandle(self.resource_id, new_version)


@dataclass
class MutationStep:
    """One request/response exchange.

    Attributes:
        name: Human-readable step name used in output and errors.
        build: Callable(version, references) returning a draft (with to_dict()) or dict.
        requires: Reference names the builder reads.
        extracts: {reference_name: path} read from the response.
        invalidates: Reference names that no longer exist once this step succeeds.
        request_artifact: Snapshot name for the request body (None = don't record).
        artifact: Snapshot name for the response (None = don't record).
    """
    name: str
    build: Callable[[int, Dict[str, Any]], Any]
    requires: Sequence[str] = ()
    extracts: Dict[str, str] = field(default_factory=dict)
    invalidates: Sequence[str] = ()
    request_artifact: Optional[str] = None
    artifact: Optional[str] = None


@dataclass
class PipelineResult:
    handle: VersionHandle
    references: Dict[str, Any]
    completed_steps: List[str] = field(default_factory=list)
    artifacts: List[str] = field(default_factory=list)
    last_response: Optional[Dict[str, Any]] = None


class VersionedMutationPipeline:
    """Runs MutationSteps strictly in order against a single resource.

    Attributes:
        submit: Callable(resource_id, body) performing the update request.
        handle: Current VersionHandle; replaced after every successful step.
        references: Derived references available to later steps.
        sink: Optional artifact sink with save_json(name, data) -> path | None.
        project: Optional callable reducing a response before it is recorded.
        state: One of PipelineState.
    """

    def __init__(
        self,
        submit: Callable[[str, Dict[str, Any]], Dict[str, Any]],
        handle: VersionHandle,
        references: Optional[Dict[str, Any]] = None,
        sink=None,
        project: Optional[Callable[[Dict[str, Any]], Any]] = None,
        debug: bool = False,
    ):
        self.submit = submit
        self.handle = handle
        self.references = dict(references or {})
        self.sink = sink
        self.project = project
        self.debug = debug
        self.state = PipelineState.NOT_STARTED
        self._invalidated: Dict[str, str] = {}
        self._result = PipelineResult(handle=handle, references=self.references)

    @property
    def completed_steps(self) -> List[str]:
        return list(self._result.completed_steps)

    def run(self, steps: Sequence[MutationStep]) -> PipelineResult:
        """Execute all steps, or stop at the first failure.

        Raises:
            PipelineAbortedError: Wrapping the first error raised by any step.
            RuntimeError: If the pipeline has already been run.
        """
        if self.state != PipelineState.NOT_STARTED:
            raise RuntimeError(f"Pipeline already {self.state.value}; create a new one to run again")

        self.state = PipelineState.RUNNING
        for index, step in enumerate(steps):
            try:
                self._run_step(step)
            except Exception as e:
                self.state = PipelineState.ABORTED
                raise PipelineAbortedError(step.name, index, e) from e
            self._result.completed_steps.append(step.name)

        self.state = PipelineState.COMPLETED
        return self._result

    def _run_step(self, step: MutationStep):
        refs = self._resolve(step)

        draft = step.build(self.handle.version, refs)
        body = draft.to_dict() if hasattr(draft, "to_dict") else draft
        if body.get("version") != self.handle.version:
            raise ExtractionError(
                "version",
                f"Step '{step.name}' built a body with version {body.get('version')!r}, "
                f"current version is {self.handle.version}",
            )
        self._record(step.request_artifact, body)

        if self.debug:
            print(f"  [{step.name}] {self.handle.resource_id} @ version {self.handle.version}")

        response = self.submit(self.handle.resource_id, body)

        self.handle = self.handle.advance(extract(response, "version"))
        self._result.handle = self.handle

        for name in step.invalidates:
            self.references.pop(name, None)
            self._invalidated[name] = step.name
        for name, path in step.extracts.items():
            self.references[name] = extract(response, path)
            self._invalidated.pop(name, None)

        self._result.last_response = response
        self._record(step.artifact, self.project(response) if self.project else response)

        if self.debug:
            print(f"  [{step.name}] -> version {self.handle.version}")

    def _resolve(self, step: MutationStep) -> Dict[str, Any]:
        refs = {}
        for name in step.requires:
            if name in self._invalidated:
                raise MissingReferenceError(
                    step.name, name, f"no longer valid (invalidated by '{self._invalidated[name]}')"
                )
            if name not in self.references:
                raise MissingReferenceError(step.name, name)
            refs[name] = self.references[name]
        return refs

    def _record(self, name: Optional[str], data: Any):
        if not name or self.sink is None:
            return
        path = self.sink.save_json(name, data)
        if path:
            self._result.artifacts.append(path)
