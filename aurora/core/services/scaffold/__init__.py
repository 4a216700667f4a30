"""Project creation pipeline — resolve, fetch, normalize, rewrite, finalize.

Key classes:
    TemplateFetcher       - shallow clone of the template branch
    RepositoryNormalizer  - drop origin, move onto the canonical branch
    IdentifierRewriter    - module identifier → project name in file contents
    ModuleFinalizer       - go mod edit / rewrite / go mod tidy
    CreatePipeline        - the stages above with rollback on failure
"""

from aurora.core.services.scaffold.errors import (
    AbortedByUser,
    Cancelled,
    CreateError,
    FetchFailed,
    FinalizationFailed,
    NormalizationFailed,
    PathResolutionDegraded,
    RewriteFailed,
    TargetExistsNeedsConfirmation,
    TimedOut,
)
from aurora.core.services.scaffold.fetcher import TargetState, TemplateFetcher
from aurora.core.services.scaffold.finalizer import ModuleFinalizer
from aurora.core.services.scaffold.normalizer import RepositoryNormalizer
from aurora.core.services.scaffold.paths import ResolvedProject, resolve_project_params
from aurora.core.services.scaffold.pipeline import CreatePipeline, PipelineOutcome
from aurora.core.services.scaffold.rewriter import IdentifierRewriter, RewriteReport

__all__ = [
    # Errors
    "AbortedByUser",
    "Cancelled",
    "CreateError",
    "FetchFailed",
    "FinalizationFailed",
    "NormalizationFailed",
    "PathResolutionDegraded",
    "RewriteFailed",
    "TargetExistsNeedsConfirmation",
    "TimedOut",
    # Stages
    "CreatePipeline",
    "IdentifierRewriter",
    "ModuleFinalizer",
    "PipelineOutcome",
    "RepositoryNormalizer",
    "ResolvedProject",
    "RewriteReport",
    "TargetState",
    "TemplateFetcher",
    "resolve_project_params",
]
