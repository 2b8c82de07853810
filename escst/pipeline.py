import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Union

from escst.config.config import DEFAULT_STRATEGY
from escst.cst import Strategy, build_cst, get_strategy, project_ast, reconstruct_source
from escst.parser.core.parser import parse_javascript

from .exceptions import CstError, ErrorCode, InternalError
from .utils import CstArtifactEncoder

logger = logging.getLogger(__name__)

# Stage names, in execution order.
STAGES = ("tokens", "ast", "cst", "projection", "reconstruction")


class CstPipeline:
    """
    Orchestrates the full CST round trip: source to tokens and AST, AST to CST,
    then back to a plain AST and to source text.
    Each artifact is kept so callers (and the CLI) can inspect any stage.
    """

    def __init__(
        self,
        source_content: str,
        file_path: Optional[str],
        strategy: Union[str, Strategy] = DEFAULT_STRATEGY,
        dump_stages: Optional[List[str]] = None,
        stop_after_stage: Optional[str] = None,
        verify: bool = True,
    ):
        if stop_after_stage is not None and stop_after_stage not in STAGES:
            raise ValueError(f"Unknown stage '{stop_after_stage}'. Stages: {', '.join(STAGES)}")

        self.source_content = source_content
        self.file_path = os.path.abspath(file_path) if file_path else "<stdin>"
        self.strategy = strategy if isinstance(strategy, Strategy) else get_strategy(strategy)
        self.dump_stages = dump_stages or []
        self.stop_after_stage = stop_after_stage
        self.verify = verify
        self.artifacts: Dict[str, Any] = {}

    def run(self) -> Any:
        """
        Executes the pipeline stage by stage.
        Returns the artifact of `stop_after_stage` if one was given, else the CST.
        """
        try:
            # --- Stage 1 & 2: Tokenizing and Parsing ---
            # One parse yields both, the token partition depends on the AST.
            parsed = parse_javascript(self.source_content, self.file_path)
            self._store("tokens", parsed.tokens)
            if self.stop_after_stage == "tokens":
                return parsed.tokens
            self._store("ast", parsed.ast)
            if self.stop_after_stage == "ast":
                return parsed.ast

            # --- Stage 3: CST Construction ---
            cst = self._run_simple_stage("cst", build_cst, parsed.ast, parsed.tokens, self.strategy)
            if self.stop_after_stage == "cst":
                return cst

            # --- Stage 4: Projection ---
            projection = self._run_simple_stage("projection", project_ast, cst)
            if self.stop_after_stage == "projection":
                return projection

            # --- Stage 5: Reconstruction ---
            reconstruction = self._run_simple_stage("reconstruction", reconstruct_source, cst, self.strategy)

            if self.verify:
                self._verify(parsed.ast, projection, reconstruction)

            if self.stop_after_stage == "reconstruction":
                return reconstruction
            return cst

        except CstError:
            raise
        except Exception as e:
            logger.exception("Unexpected failure in the %s pipeline", self.strategy.name)
            raise InternalError(f"An unexpected internal error occurred: {e}") from e

    def _verify(self, ast, projection, reconstruction: str):
        if reconstruction != self.source_content:
            raise CstError(
                ErrorCode.ROUND_TRIP_FAILED,
                file_path=self.file_path,
                strategy=self.strategy.name,
                details=f"reconstructed text differs from the source ({len(reconstruction)} vs {len(self.source_content)} characters).",
            )
        if projection != ast:
            raise CstError(
                ErrorCode.ROUND_TRIP_FAILED,
                file_path=self.file_path,
                strategy=self.strategy.name,
                details="the projected AST differs from the parsed AST.",
            )
        logger.debug("Round trip verified for %s under the %s strategy", self.file_path, self.strategy.name)

    def _store(self, name: str, result: Any):
        self.artifacts[name] = result
        if name in self.dump_stages:
            self.save_artifact(name, result)

    def _run_simple_stage(self, name: str, func: Callable, *args, **kwargs) -> Any:
        """Runs a single function as a stage, storing and returning its result."""
        logger.debug("Running stage '%s'", name)
        result = func(*args, **kwargs)
        self._store(name, result)
        return result

    def save_artifact(self, name: str, data: Any):
        """Saves an intermediate artifact next to the input file. Reconstructed source is saved as text."""

        if self.file_path == "<stdin>":
            base_name = "stdin_output"
        else:
            base_name = os.path.splitext(self.file_path)[0]

        extension = "js" if name == "reconstruction" else "json"
        output_path = f"{base_name}.{name}.{extension}"

        print(f"--- Saving artifact '{name}' to {output_path} ---")

        try:
            with open(output_path, "w", encoding="utf-8", newline="") as f:
                if isinstance(data, str):
                    f.write(data)
                else:
                    json.dump(data, f, indent=2, sort_keys=False, cls=CstArtifactEncoder)
        except OSError as e:
            print(f"Error: Could not save artifact '{name}': {e}")


def process_source(
    source_content: str,
    file_path: Optional[str] = None,
    strategy: Union[str, Strategy] = DEFAULT_STRATEGY,
    dump_stages: Optional[List[str]] = None,
    stop_after_stage: Optional[str] = None,
    verify: bool = True,
):
    """High-level entry point for the CST pipeline."""
    pipeline = CstPipeline(source_content, file_path, strategy, dump_stages, stop_after_stage, verify)
    return pipeline.run()
