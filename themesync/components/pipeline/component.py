"""
Pipeline - the Empty -> Loaded -> Validated -> Exported state machine.

A pipeline owns the tree of exactly one run. Validation can be repeated but
never moves a run back to Loaded; Exported is terminal.
"""

from __future__ import annotations

import logging
from pathlib import Path

from themesync.components.exporter import ArtifactSinkPort, ExportInput, ExportOutput, run_export
from themesync.components.exporter.adapters import default_sink
from themesync.components.registry import SchemaRegistry
from themesync.components.snapshot import LoadSnapshotInput, LoadSnapshotOutput, run_load
from themesync.components.snapshot.adapters import default_filesystem
from themesync.components.snapshot.ports import SnapshotSourcePort
from themesync.components.tree import TokenTree
from themesync.components.validator import ValidationReport, validate
from themesync.errors import ExportOnInvalidTree, Violation
from themesync.formats import ArtifactFormat

from .models import PipelineState

logger = logging.getLogger(__name__)

_ALLOWED: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.EMPTY: frozenset({PipelineState.EMPTY, PipelineState.LOADED}),
    PipelineState.LOADED: frozenset(
        {PipelineState.EMPTY, PipelineState.LOADED, PipelineState.VALIDATED}
    ),
    PipelineState.VALIDATED: frozenset({PipelineState.VALIDATED, PipelineState.EXPORTED}),
    PipelineState.EXPORTED: frozenset(),
}


def can_transition(current: PipelineState, new: PipelineState) -> bool:
    """Determine if a state transition is allowed."""
    return new in _ALLOWED[current]


class Pipeline:
    """Runs load, validate and export over one fresh tree."""

    def __init__(
        self,
        registry: SchemaRegistry,
        *,
        source: SnapshotSourcePort = default_filesystem,
        sink: ArtifactSinkPort = default_sink,
    ) -> None:
        self._registry = registry
        self._source = source
        self._sink = sink
        self._state = PipelineState.EMPTY
        self._tree: TokenTree | None = None
        self._report: ValidationReport | None = None
        self._load_errors: list[Violation] = []

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def tree(self) -> TokenTree | None:
        return self._tree

    @property
    def report(self) -> ValidationReport | None:
        return self._report

    @property
    def load_errors(self) -> list[Violation]:
        return list(self._load_errors)

    def _move(self, new: PipelineState) -> None:
        if not can_transition(self._state, new):
            raise ValueError(
                f"Invalid transition from {self._state.value} to {new.value}"
            )
        logger.debug("Pipeline %s -> %s", self._state.value, new.value)
        self._state = new

    def load(self, path: Path | str) -> LoadSnapshotOutput:
        """Load a snapshot. Any load failure leaves the pipeline Empty."""
        if not can_transition(self._state, PipelineState.LOADED):
            raise ValueError(f"Cannot load in state {self._state.value}")

        output = run_load(LoadSnapshotInput(path=path), registry=self._registry, fs=self._source)
        self._report = None
        if output.success:
            self._tree = output.tree
            self._load_errors = []
            self._move(PipelineState.LOADED)
        else:
            self._tree = None
            self._load_errors = list(output.errors)
            self._move(PipelineState.EMPTY)
        return output

    def validate(self) -> ValidationReport:
        """Validate the loaded tree. Passing moves to Validated."""
        if self._tree is None or self._state not in (
            PipelineState.LOADED,
            PipelineState.VALIDATED,
        ):
            raise ValueError(f"Cannot validate in state {self._state.value}")

        self._report = validate(self._tree)
        if self._report.is_valid:
            self._move(PipelineState.VALIDATED)
        return self._report

    def export(
        self, out_dir: Path | str, *, fmt: ArtifactFormat = ArtifactFormat.JSON
    ) -> ExportOutput:
        """Export the validated tree. Raises ExportOnInvalidTree before a passing validation."""
        if (
            self._state is not PipelineState.VALIDATED
            or self._report is None
            or self._report.valid is None
        ):
            raise ExportOnInvalidTree(f"Cannot export in state {self._state.value}")

        output = run_export(
            ExportInput(valid=self._report.valid, out_dir=out_dir, format=fmt), sink=self._sink
        )
        self._move(PipelineState.EXPORTED)
        return output
