"""Generation orchestrator for one documentation version.

This module provides the GenerationOrchestrator class that runs one pass of
the pipeline:

1. Check - Validate configuration and refuse historical versions
2. Load - Load and index the manifest, report containment cycles
3. Plan - Compute the documentation tree
4. Sidecars - Load the version's sidecars and create missing skeletons
5. Write - Render every page into a staging folder and write navigation
6. Promote - Replace the version folder, archive the previous current
   version and refresh the current mirror

Nothing is written before step 4, so configuration, manifest and version
errors leave the output and sidecar trees untouched.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from apiwiki.config import Config, ConfigError, load_settings, validate_config
from apiwiki.diagnostics import Diagnostic, DiagnosticLog
from apiwiki.generation.layout import TreePlan, plan_tree
from apiwiki.generation.navigation import write_navigation
from apiwiki.generation.pages import PageRenderer
from apiwiki.generation.staging import (
    interrupted_builds,
    prepare_staging_directory,
    promote_staging_to_production,
)
from apiwiki.generation.writer import OutputWriteError, write_tree
from apiwiki.manifest import ManifestError, ManifestIndex, load_manifest, report_containment_cycles
from apiwiki.sidecars import SidecarStore, sidecar_relative_path
from apiwiki.versions import VersionError, VersionManager

logger = logging.getLogger(__name__)


class GenerationPhase(Enum):
    """Phases of a generation run."""

    CHECK = "check"
    LOAD = "load"
    PLAN = "plan"
    SIDECARS = "sidecars"
    WRITE = "write"
    PROMOTE = "promote"


@dataclass
class GenerationProgress:
    """Progress update during generation.

    Attributes:
        phase: Current generation phase.
        message: Human-readable progress message.
    """

    phase: GenerationPhase
    message: str = ""


@dataclass
class GenerationResult:
    """Outcome of a generation run.

    Attributes:
        ok: Whether the run completed.
        exit_code: 0 on success, 1 on a fatal error.
        version: Version tag that was generated (None if config was invalid).
        error: Message naming the failing path or setting, for failed runs.
        pages_written: Number of pages in the generated tree.
        sidecars_created: Number of new sidecar files.
        archived_version: Version that became historical during this run.
        diagnostics: Non-fatal warnings collected during the run.
    """

    ok: bool
    exit_code: int
    version: Optional[str] = None
    error: Optional[str] = None
    pages_written: int = 0
    sidecars_created: int = 0
    archived_version: Optional[str] = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


ProgressCallback = Callable[[GenerationProgress], None]


class GenerationOrchestrator:
    """Runs the pipeline for the version named in the configuration.

    Attributes:
        config: Validated configuration.
        diagnostics: Warnings collected during the run.
    """

    def __init__(self, config: Config, progress_callback: Optional[ProgressCallback] = None):
        self.config = config
        self.progress_callback = progress_callback
        self.diagnostics = DiagnosticLog()
        self.versions = VersionManager(config)

    def _emit_progress(self, phase: GenerationPhase, message: str) -> None:
        logger.info(f"[{phase.value}] {message}")
        if self.progress_callback:
            self.progress_callback(GenerationProgress(phase=phase, message=message))

    def run(self) -> GenerationResult:
        """Run every phase in order.

        Raises:
            ConfigError, ManifestError, OutputWriteError, VersionError: On a
                fatal condition; the run stops at the failing phase.
        """
        config = validate_config(self.config)
        version = config.version

        # Phase 1: Check
        self._emit_progress(GenerationPhase.CHECK, f"Generating version {version}")
        registry = self.versions.check(version)
        staging = config.staging_path(version)
        for leftover in interrupted_builds(config.output_path):
            if leftover == staging:
                logger.warning(f"Discarding interrupted build {leftover.name}")
            else:
                logger.warning(f"Interrupted build {leftover.name} left in {config.output_path}")

        # Phase 2: Load
        self._emit_progress(GenerationPhase.LOAD, f"Loading {config.manifest_path}")
        manifest = load_manifest(config.manifest_path)
        index = ManifestIndex(manifest, self.diagnostics)
        report_containment_cycles(index, self.diagnostics)

        # Phase 3: Plan
        plan = plan_tree(
            index,
            ignore_attributes=config.generation.ignore_attributes,
            global_namespace_name=config.generation.global_namespace_name,
            diagnostics=self.diagnostics,
        )
        self._emit_progress(GenerationPhase.PLAN, f"Planned {len(plan.nodes)} pages")

        # Phase 4: Sidecars
        sidecars = SidecarStore(
            config.sidecar_path(version), config.snippets_path, self.diagnostics
        ).load()
        renderer = PageRenderer(
            index,
            plan,
            sidecars,
            version,
            diagnostics=self.diagnostics,
            description_placeholder=config.generation.description_placeholder,
        )
        created = 0
        if config.generation.generate_sidecars:
            previous = None
            if (
                config.generation.carry_forward_sidecars
                and registry.current is not None
                and registry.current != version
            ):
                # Warnings about an older version's sidecars are not this run's concern
                previous = SidecarStore(
                    config.sidecar_path(registry.current), config.snippets_path, DiagnosticLog()
                ).load()
            created = self._write_skeletons(plan, sidecars, renderer, previous)
        self._emit_progress(
            GenerationPhase.SIDECARS, f"{len(sidecars)} sidecars, {created} created"
        )

        # Phase 5: Write
        try:
            prepare_staging_directory(staging)
        except OSError as e:
            raise OutputWriteError(staging, str(e)) from e
        pages = write_tree(plan, staging, renderer.render)
        try:
            write_navigation(staging, self.diagnostics)
        except OSError as e:
            raise OutputWriteError(staging, str(e)) from e
        self._emit_progress(GenerationPhase.WRITE, f"Wrote {pages} pages")

        # Phase 6: Promote
        target = config.version_path(version)
        try:
            promote_staging_to_production(staging, target)
        except OSError as e:
            raise OutputWriteError(target, str(e)) from e
        archived = self.versions.promote(version)
        self._emit_progress(
            GenerationPhase.PROMOTE,
            f"{version} is current" + (f"; {archived} archived" if archived else ""),
        )

        return GenerationResult(
            ok=True,
            exit_code=0,
            version=version,
            pages_written=pages,
            sidecars_created=created,
            archived_version=archived,
            diagnostics=list(self.diagnostics),
        )

    def _write_skeletons(
        self,
        plan: TreePlan,
        sidecars: SidecarStore,
        renderer: PageRenderer,
        previous: Optional[SidecarStore],
    ) -> int:
        created = 0
        for node in plan.nodes:
            try:
                if sidecars.ensure_skeleton(node.uid, node.path, renderer.title(node), previous):
                    created += 1
            except OSError as e:
                raise OutputWriteError(sidecars.root / sidecar_relative_path(node.path), str(e)) from e
        return created


def run_generation(
    config: Optional[Config] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> GenerationResult:
    """Generate one version and report the outcome.

    Fatal errors are logged and returned as a failed result rather than
    raised.

    Args:
        config: Configuration to use; loaded from the environment when None.
        progress_callback: Optional callback for progress updates.

    Returns:
        GenerationResult with exit_code 0 on success and 1 on failure.
    """
    orchestrator: Optional[GenerationOrchestrator] = None
    version: Optional[str] = None
    try:
        if config is None:
            config = load_settings()
        version = config.generation.version
        orchestrator = GenerationOrchestrator(config, progress_callback)
        return orchestrator.run()
    except (ConfigError, ManifestError, OutputWriteError, VersionError) as e:
        logger.error(f"Generation failed: {e}")
        return GenerationResult(
            ok=False,
            exit_code=1,
            version=version,
            error=str(e),
            diagnostics=list(orchestrator.diagnostics) if orchestrator is not None else [],
        )
